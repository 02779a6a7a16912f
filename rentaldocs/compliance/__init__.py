from .recency import is_within_window, parse_date, subtract_months
from .catalog import (BookingCategory, DocumentType, SimpleSlot, DatedSlot, ClassifiedSlot,
                      CategoryRequirements, requirements_for)
from .upload_state import (UploadState, StartUpload, UploadSucceeded, UploadFailed, Clear, SetIssueDate,
                           SetDocumentType, reduce_upload_state, check_upload_candidate,
                           initial_slot_states, carry_over_slot_states)
from .engine import ComplianceEngine, ComplianceResult, ComplianceFailure, SlotPayload, evaluate

__all__ = [
    'is_within_window', 'parse_date', 'subtract_months',
    'BookingCategory', 'DocumentType', 'SimpleSlot', 'DatedSlot', 'ClassifiedSlot',
    'CategoryRequirements', 'requirements_for',
    'UploadState', 'StartUpload', 'UploadSucceeded', 'UploadFailed', 'Clear', 'SetIssueDate',
    'SetDocumentType', 'reduce_upload_state', 'check_upload_candidate',
    'initial_slot_states', 'carry_over_slot_states',
    'ComplianceEngine', 'ComplianceResult', 'ComplianceFailure', 'SlotPayload', 'evaluate'
]
