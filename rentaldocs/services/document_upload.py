import asyncio
import logging
from typing import Any, Optional

from ..compliance.upload_state import (DEFAULT_MAX_UPLOAD_BYTES, StartUpload, UploadFailed, UploadState,
                                       UploadSucceeded, check_upload_candidate, reduce_upload_state)
from ..utils.exceptions import StorageError, handle_exception
from .interfaces import FileStorage

logger = logging.getLogger('rentaldocs.services.document_upload')


async def upload_slot_document(
    state: Optional[UploadState],
    storage: FileStorage,
    payload: bytes,
    filename: str,
    content_type: Optional[str],
    file_ref: Any = None,
    max_bytes: int = DEFAULT_MAX_UPLOAD_BYTES
) -> UploadState:
    """Upload one supporting document and return the slot's next state.

    Rejected files and storage failures end in an ``UploadFailed`` transition
    rather than an exception, so the slot always carries a user-facing error.
    """
    rejection = check_upload_candidate(filename, content_type, len(payload), max_bytes)
    if rejection:
        return reduce_upload_state(state, UploadFailed(rejection))

    state = reduce_upload_state(state, StartUpload(file_ref if file_ref is not None else filename))
    try:
        url = await asyncio.to_thread(storage.upload, payload, content_type or "application/octet-stream", filename)
        if not url:
            raise StorageError("Storage returned no URL", operation="upload")
    except Exception as e:
        handle_exception(e, "upload_slot_document", logger, reraise=False)
        return reduce_upload_state(state, UploadFailed("Upload failed"))

    return reduce_upload_state(state, UploadSucceeded(url))
