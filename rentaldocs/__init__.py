"""Rental agreement compliance checks and agreement PDF composition."""

__version__ = "1.0.0"

from .config import Config, config
from .utils import (RentalDocsError, ImageResolutionError, ConfigurationError, UnknownBookingCategoryError,
                    LayoutError, RecordNotFoundError, InvalidRecordError, StorageError,
                    setup_logging, get_logger, ImageResolver, build_image_resolver)
from .models import (AgreementFacts, CompanyDetails, CustomerDetails, VehicleDetails, RentalWindow,
                     ResolvedImage, ComposedDocument, Degradation, GenerationResult, ComplianceResultSchema)
from .compliance import (BookingCategory, DocumentType, ComplianceEngine, ComplianceResult, evaluate,
                         requirements_for, is_within_window, reduce_upload_state, UploadState)
from .processors import AgreementCompositor, LayoutEngine
from .services import AgreementService, FileStorage, RecordStore, build_agreement_facts, upload_slot_document

__all__ = [
    'Config', 'config',
    'RentalDocsError', 'ImageResolutionError', 'ConfigurationError', 'UnknownBookingCategoryError',
    'LayoutError', 'RecordNotFoundError', 'InvalidRecordError', 'StorageError',
    'setup_logging', 'get_logger', 'ImageResolver', 'build_image_resolver',
    'AgreementFacts', 'CompanyDetails', 'CustomerDetails', 'VehicleDetails', 'RentalWindow',
    'ResolvedImage', 'ComposedDocument', 'Degradation', 'GenerationResult', 'ComplianceResultSchema',
    'BookingCategory', 'DocumentType', 'ComplianceEngine', 'ComplianceResult', 'evaluate',
    'requirements_for', 'is_within_window', 'reduce_upload_state', 'UploadState',
    'AgreementCompositor', 'LayoutEngine',
    'AgreementService', 'FileStorage', 'RecordStore', 'build_agreement_facts', 'upload_slot_document',
]
