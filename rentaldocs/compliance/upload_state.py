"""Per-slot upload state and its transition function."""

from dataclasses import dataclass, replace
from pathlib import PurePosixPath
from typing import Any, Dict, Mapping, Optional, Union

from .catalog import BookingCategory, DocumentType, requirements_for
from .recency import DateLike

ALLOWED_CONTENT_TYPES = frozenset({
    "image/jpeg", "image/jpg", "image/png", "image/webp", "image/heic", "image/heif", "application/pdf"
})
ALLOWED_EXTENSIONS = frozenset({"jpg", "jpeg", "png", "webp", "heic", "heif", "pdf"})
DEFAULT_MAX_UPLOAD_BYTES = 10 * 1024 * 1024


@dataclass(frozen=True)
class UploadState:
    file_ref: Any = None
    remote_url: Optional[str] = None
    uploading: bool = False
    error: Optional[str] = None
    issue_date: DateLike = None
    document_type: Optional[str] = None

    @property
    def has_file(self) -> bool:
        return bool(self.remote_url)


@dataclass(frozen=True)
class StartUpload:
    file_ref: Any = None


@dataclass(frozen=True)
class UploadSucceeded:
    url: str


@dataclass(frozen=True)
class UploadFailed:
    reason: str


@dataclass(frozen=True)
class Clear:
    pass


@dataclass(frozen=True)
class SetIssueDate:
    issue_date: DateLike


@dataclass(frozen=True)
class SetDocumentType:
    document_type: Union[DocumentType, str, None]


UploadEvent = Union[StartUpload, UploadSucceeded, UploadFailed, Clear, SetIssueDate, SetDocumentType]


def reduce_upload_state(state: Optional[UploadState], event: UploadEvent) -> UploadState:
    state = state or UploadState()

    if isinstance(event, StartUpload):
        return replace(state, file_ref=event.file_ref, uploading=True, error=None)
    if isinstance(event, UploadSucceeded):
        return replace(state, remote_url=event.url, uploading=False, error=None)
    if isinstance(event, UploadFailed):
        return replace(state, uploading=False, error=event.reason)
    if isinstance(event, Clear):
        return UploadState()
    if isinstance(event, SetIssueDate):
        return replace(state, issue_date=event.issue_date)
    if isinstance(event, SetDocumentType):
        document_type = event.document_type
        if isinstance(document_type, DocumentType):
            document_type = document_type.value
        return replace(state, document_type=document_type or None)

    raise TypeError(f"Unsupported upload event: {event!r}")


def check_upload_candidate(
    filename: str,
    content_type: Optional[str],
    size: int,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
) -> Optional[str]:
    """Return a user-facing error for a file that must not be uploaded, else None."""
    if size > max_bytes:
        return f"File size exceeds {max_bytes // (1024 * 1024)}MB limit"

    extension = PurePosixPath(filename or "").suffix.lower().lstrip('.')
    if (content_type or "").lower() not in ALLOWED_CONTENT_TYPES and extension not in ALLOWED_EXTENSIONS:
        return "Invalid file type. Please upload JPEG, PNG, WEBP, HEIC, or PDF."
    return None


def initial_slot_states(
    category: Union[BookingCategory, str],
    saved_urls: Optional[Mapping[str, str]] = None
) -> Dict[str, UploadState]:
    saved_urls = saved_urls or {}
    return {
        slot.slot_id: UploadState(remote_url=saved_urls.get(slot.slot_id) or None)
        for slot in requirements_for(category).slots
    }


def carry_over_slot_states(
    states: Mapping[str, UploadState],
    category: Union[BookingCategory, str],
    saved_urls: Optional[Mapping[str, str]] = None
) -> Dict[str, UploadState]:
    """Re-key slot states for a new category, keeping progress on shared slot ids."""
    fresh = initial_slot_states(category, saved_urls)
    return {slot_id: states.get(slot_id, empty) for slot_id, empty in fresh.items()}
