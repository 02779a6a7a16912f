"""Static document requirements per booking category.

Each category maps to an ordered tuple of slot variants. The variant kind, not a
set of boolean flags, decides which checks a slot needs:

* ``SimpleSlot``     - an uploaded file is enough
* ``DatedSlot``      - the file plus an issue date inside the recency window
* ``ClassifiedSlot`` - a dated file whose document type must be declared and allowed

Slot ids are shared between categories so progress survives a category change.
"""

import logging
from enum import Enum
from dataclasses import dataclass
from typing import Dict, FrozenSet, Optional, Tuple, Union

from ..utils.exceptions import UnknownBookingCategoryError

logger = logging.getLogger('rentaldocs.compliance.catalog')


class BookingCategory(Enum):
    STANDARD = "Rent"
    FLEXI_TERM = "Flexi Hire"
    COMMERCIAL_HIRE = "PCO Hire"

    @classmethod
    def from_label(cls, label: Union[str, 'BookingCategory']) -> 'BookingCategory':
        if isinstance(label, cls):
            return label
        normalized = str(label or '').strip().lower()
        for category in cls:
            if normalized in (category.value.lower(), category.name.lower()):
                return category
        raise UnknownBookingCategoryError(label)


class DocumentType(Enum):
    UTILITY_BILL = "utility_bill"
    COUNCIL_TAX = "council_tax"
    GOVERNMENT_LETTER = "government_letter"
    TENANCY_AGREEMENT = "tenancy_agreement"
    OTHER_OFFICIAL = "other_official"
    BANK_STATEMENT = "bank_statement"

    @property
    def label(self) -> str:
        return DOCUMENT_TYPE_LABELS[self]


DOCUMENT_TYPE_LABELS = {
    DocumentType.UTILITY_BILL: "Utility Bill",
    DocumentType.COUNCIL_TAX: "Council Tax Statement",
    DocumentType.GOVERNMENT_LETTER: "Government Letter",
    DocumentType.TENANCY_AGREEMENT: "Tenancy Agreement",
    DocumentType.OTHER_OFFICIAL: "Other Official Letter",
    DocumentType.BANK_STATEMENT: "Bank Statement",
}


@dataclass(frozen=True)
class SimpleSlot:
    slot_id: str
    label: str
    required: bool = True
    helper_text: Optional[str] = None

    @property
    def needs_issue_date(self) -> bool:
        return False

    @property
    def needs_document_type(self) -> bool:
        return False


@dataclass(frozen=True)
class DatedSlot(SimpleSlot):

    @property
    def needs_issue_date(self) -> bool:
        return True


@dataclass(frozen=True)
class ClassifiedSlot(DatedSlot):
    disallowed_types: FrozenSet[DocumentType] = frozenset()

    @property
    def needs_document_type(self) -> bool:
        return True

    def allows(self, document_type: Union[DocumentType, str, None]) -> bool:
        if isinstance(document_type, DocumentType):
            document_type = document_type.value
        if not document_type:
            return False
        return document_type not in {t.value for t in self.disallowed_types}


SlotSpec = Union[SimpleSlot, DatedSlot, ClassifiedSlot]


@dataclass(frozen=True)
class CategoryRequirements:
    category: BookingCategory
    title: str
    slots: Tuple[SlotSpec, ...]
    needs_national_insurance: bool = True
    needs_financial_proof: bool = False
    needs_secondary_license: bool = False

    @property
    def slot_ids(self) -> Tuple[str, ...]:
        return tuple(slot.slot_id for slot in self.slots)

    @property
    def required_slots(self) -> Tuple[SlotSpec, ...]:
        return tuple(slot for slot in self.slots if slot.required)

    def slot(self, slot_id: str) -> Optional[SlotSpec]:
        return next((slot for slot in self.slots if slot.slot_id == slot_id), None)


LICENSE_FRONT = SimpleSlot("licenseFront", "Driving Licence (Front)")
LICENSE_BACK = SimpleSlot("licenseBack", "Driving Licence (Back)")
PRIVATE_HIRE_FRONT = SimpleSlot("privateHireLicenseFront", "Private Hire Licence (Front)")
PRIVATE_HIRE_BACK = SimpleSlot("privateHireLicenseBack", "Private Hire Licence (Back)")
BANK_STATEMENT = DatedSlot(
    "bankStatement", "Bank Statement (Proof of Affordability)",
    helper_text="Bank statement issued within the last 3 months")
PROOF_OF_ADDRESS_ANY = DatedSlot(
    "proofOfAddress", "Proof of Address",
    helper_text="Bank statement OR official letter, issued within 3 months")
PROOF_OF_ADDRESS_OFFICIAL = ClassifiedSlot(
    "proofOfAddress", "Proof of Address (NOT Bank Statement)",
    helper_text="Utility bill, council tax, government letter, tenancy agreement - issued within 3 months",
    disallowed_types=frozenset({DocumentType.BANK_STATEMENT}))

CATALOG: Dict[BookingCategory, CategoryRequirements] = {
    BookingCategory.STANDARD: CategoryRequirements(
        category=BookingCategory.STANDARD,
        title="Rent",
        slots=(LICENSE_FRONT, LICENSE_BACK, PROOF_OF_ADDRESS_ANY),
    ),
    BookingCategory.FLEXI_TERM: CategoryRequirements(
        category=BookingCategory.FLEXI_TERM,
        title="Flexi Hire",
        slots=(LICENSE_FRONT, LICENSE_BACK, BANK_STATEMENT, PROOF_OF_ADDRESS_OFFICIAL),
        needs_financial_proof=True,
    ),
    BookingCategory.COMMERCIAL_HIRE: CategoryRequirements(
        category=BookingCategory.COMMERCIAL_HIRE,
        title="PCO Hire",
        slots=(LICENSE_FRONT, LICENSE_BACK, PRIVATE_HIRE_FRONT, PRIVATE_HIRE_BACK,
               BANK_STATEMENT, PROOF_OF_ADDRESS_OFFICIAL),
        needs_financial_proof=True,
        needs_secondary_license=True,
    ),
}

MOST_RESTRICTIVE = BookingCategory.COMMERCIAL_HIRE


def requirements_for(category: Union[BookingCategory, str]) -> CategoryRequirements:
    """Catalog entry for a category. Unknown values resolve to the strictest entry."""
    try:
        resolved = BookingCategory.from_label(category)
    except UnknownBookingCategoryError as e:
        logger.error(f"{e.message}; applying {MOST_RESTRICTIVE.value} requirements",
                     extra={'error_details': e.details})
        resolved = MOST_RESTRICTIVE
    return CATALOG[resolved]
