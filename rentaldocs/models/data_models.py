import base64
from io import BytesIO
from dataclasses import dataclass, field, asdict
from typing import Optional, Dict, Any, Tuple

from reportlab.lib.utils import ImageReader

from ..utils.exceptions import ImageResolutionError


@dataclass(frozen=True)
class CompanyDetails:
    name: str = ""
    address: str = ""
    phone: str = ""
    email: str = ""
    logo_path: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class CustomerDetails:
    name: str = ""
    email: str = ""
    phone: str = ""
    license_number: str = ""
    address: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class VehicleDetails:
    description: str = ""
    registration: str = ""
    odometer: str = ""
    fuel: str = ""

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class RentalWindow:
    pickup_date: str = ""
    pickup_time: str = ""
    dropoff_date: str = ""
    dropoff_time: str = ""
    pickup_location: str = ""
    dropoff_location: str = ""

    @property
    def pickup(self) -> str:
        return f"{self.pickup_date} at {self.pickup_time}"

    @property
    def dropoff(self) -> str:
        return f"{self.dropoff_date} at {self.dropoff_time}"

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class AgreementFacts:
    """Everything the compositor needs to lay out one agreement. Never mutated."""
    company: CompanyDetails
    customer: CustomerDetails
    vehicle: VehicleDetails
    rental: RentalWindow
    insurance_text: str
    clauses: Tuple[str, ...]
    agreement_number: str
    created_date: str
    customer_signature: Optional[str] = None
    admin_signature: Optional[str] = None
    customer_name_signed: Optional[str] = None
    admin_name: Optional[str] = None
    signed_date: Optional[str] = None

    def __post_init__(self):
        if not isinstance(self.clauses, tuple):
            object.__setattr__(self, 'clauses', tuple(self.clauses))

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class ResolvedImage:
    """Raw image bytes plus pixel size, produced once per reference per composition."""
    data: bytes
    width: int
    height: int
    mime_type: str = "image/png"
    source: str = ""

    @property
    def data_url(self) -> str:
        return f"data:{self.mime_type};base64,{base64.b64encode(self.data).decode('ascii')}"

    @property
    def aspect_ratio(self) -> float:
        return self.height / self.width if self.width else 1.0

    def reader(self) -> ImageReader:
        try:
            image_reader = ImageReader(BytesIO(self.data))
            image_reader.getSize()
            return image_reader
        except Exception as e:
            raise ImageResolutionError(self.source or self.data_url, e, message="Image bytes are not a decodable raster")


@dataclass(frozen=True)
class Degradation:
    element: str
    reason: str


@dataclass(frozen=True)
class ComposedDocument:
    content: bytes
    filename: str
    page_count: int
    content_type: str = "application/pdf"
    degradations: Tuple[Degradation, ...] = field(default_factory=tuple)

    @property
    def size(self) -> int:
        return len(self.content)

    def degraded(self, element: str) -> bool:
        return any(d.element == element for d in self.degradations)


@dataclass(frozen=True)
class GenerationResult:
    agreement_id: str
    document_url: str
    document: ComposedDocument

    def to_dict(self) -> Dict[str, Any]:
        return {
            "success": True,
            "agreement_id": self.agreement_id,
            "signed_pdf_url": self.document_url,
            "page_count": self.document.page_count,
            "degradations": [asdict(d) for d in self.document.degradations]
        }
