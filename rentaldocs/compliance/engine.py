"""Document compliance evaluation.

``evaluate`` is a pure projection of the checkout state: it never raises for
user-data problems and never caches. Every failing check is reported in
``ComplianceResult.failures`` so the UI can point at the offending slot.
"""

from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional, Tuple, Union

from ..utils.exceptions import ConfigurationError
from ..utils.validators import is_blank
from .catalog import (BookingCategory, CategoryRequirements, ClassifiedSlot, DatedSlot,
                      SimpleSlot, SlotSpec, requirements_for)
from .recency import DateLike, is_within_window
from .upload_state import UploadState

LICENSE_FIELD = "drivingLicenseNumber"
NI_FIELD = "niNumber"

MISSING_VALUE = "missing_value"
MISSING_FILE = "missing_file"
MISSING_ISSUE_DATE = "missing_issue_date"
OUTSIDE_WINDOW = "outside_recency_window"
MISSING_DOCUMENT_TYPE = "missing_document_type"
DISALLOWED_DOCUMENT_TYPE = "disallowed_document_type"

INCOMPLETE_REASONS = frozenset({MISSING_FILE, MISSING_ISSUE_DATE, MISSING_DOCUMENT_TYPE})


@dataclass(frozen=True)
class ComplianceFailure:
    field: str
    reason: str


@dataclass(frozen=True)
class SlotPayload:
    url: str = ""
    issue_date: DateLike = None
    document_type: Optional[str] = None


@dataclass(frozen=True)
class ComplianceResult:
    is_complete: bool
    license_number: str
    national_insurance_number: str
    per_slot: Dict[str, SlotPayload]
    failures: Tuple[ComplianceFailure, ...] = field(default_factory=tuple)
    completed_count: int = 0
    total_required: int = 0

    def failures_for(self, field_name: str) -> Tuple[ComplianceFailure, ...]:
        return tuple(failure for failure in self.failures if failure.field == field_name)


class ComplianceEngine:

    def __init__(self, reference_date: DateLike, window_months: int = 3):
        self.reference_date = reference_date
        self.window_months = window_months

    def evaluate(
        self,
        category: Union[BookingCategory, str],
        license_number: Optional[str],
        ni_number: Optional[str],
        slot_states: Mapping[str, UploadState]
    ) -> ComplianceResult:
        requirements = requirements_for(category)
        failures = []
        filled_slots = 0

        if is_blank(license_number):
            failures.append(ComplianceFailure(LICENSE_FIELD, MISSING_VALUE))
        if requirements.needs_national_insurance and is_blank(ni_number):
            failures.append(ComplianceFailure(NI_FIELD, MISSING_VALUE))

        for slot in requirements.required_slots:
            state = slot_states.get(slot.slot_id) or UploadState()
            reasons = self._check_slot(slot, state)
            failures.extend(ComplianceFailure(slot.slot_id, reason) for reason in reasons)
            if not INCOMPLETE_REASONS.intersection(reasons):
                filled_slots += 1

        # Progress counts filled-in slots and the NI number; validity is is_complete's job
        ni_given = requirements.needs_national_insurance and not is_blank(ni_number)
        return ComplianceResult(
            is_complete=not failures,
            license_number=str(license_number or "").strip(),
            national_insurance_number=str(ni_number or "").strip(),
            per_slot=self._payload(requirements, slot_states),
            failures=tuple(failures),
            completed_count=filled_slots + int(ni_given),
            total_required=len(requirements.required_slots) + int(requirements.needs_national_insurance),
        )

    def _check_slot(self, slot: SlotSpec, state: UploadState) -> Tuple[str, ...]:
        # Most specific variant first
        if isinstance(slot, ClassifiedSlot):
            return self._check_file(state) + self._check_issue_date(state) + self._check_document_type(slot, state)
        if isinstance(slot, DatedSlot):
            return self._check_file(state) + self._check_issue_date(state)
        if isinstance(slot, SimpleSlot):
            return self._check_file(state)
        raise ConfigurationError(f"Unsupported slot variant: {type(slot).__name__}", config_key='catalog')

    @staticmethod
    def _check_file(state: UploadState) -> Tuple[str, ...]:
        return () if state.remote_url else (MISSING_FILE,)

    def _check_issue_date(self, state: UploadState) -> Tuple[str, ...]:
        if not state.issue_date:
            return (MISSING_ISSUE_DATE,)
        if not is_within_window(state.issue_date, self.reference_date, self.window_months):
            return (OUTSIDE_WINDOW,)
        return ()

    @staticmethod
    def _check_document_type(slot: ClassifiedSlot, state: UploadState) -> Tuple[str, ...]:
        if not state.document_type:
            return (MISSING_DOCUMENT_TYPE,)
        if not slot.allows(state.document_type):
            return (DISALLOWED_DOCUMENT_TYPE,)
        return ()

    @staticmethod
    def _payload(requirements: CategoryRequirements, slot_states: Mapping[str, UploadState]) -> Dict[str, SlotPayload]:
        payload = {}
        for slot in requirements.slots:
            state = slot_states.get(slot.slot_id) or UploadState()
            payload[slot.slot_id] = SlotPayload(
                url=state.remote_url or "",
                issue_date=state.issue_date,
                document_type=state.document_type,
            )
        return payload


def evaluate(
    category: Union[BookingCategory, str],
    license_number: Optional[str],
    ni_number: Optional[str],
    slot_states: Mapping[str, UploadState],
    reference_date: DateLike,
    window_months: int = 3
) -> ComplianceResult:
    return ComplianceEngine(reference_date, window_months).evaluate(category, license_number, ni_number, slot_states)
