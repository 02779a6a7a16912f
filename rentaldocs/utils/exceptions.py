from typing import Optional, Dict, Any


def _preview(reference: Optional[str], limit: int = 80) -> Optional[str]:
    if reference is None:
        return None
    return reference if len(reference) <= limit else f"{reference[:limit]}..."


class RentalDocsError(Exception):

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        """Base error with message and optional details

        Args:
            message: Error message
            details: Additional error details (sanitized when logged)
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ImageResolutionError(RentalDocsError):

    def __init__(
        self,
        reference: str,
        cause: Optional[BaseException] = None,
        message: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """An image reference could not be fetched or decoded

        Args:
            reference: The original image reference (data URL, URL or path)
            cause: Underlying exception, if any
            message: Override for the default message
            details: Additional details
        """
        error_details = details or {}
        error_details['reference'] = _preview(reference)
        if cause is not None:
            error_details['cause'] = f"{cause.__class__.__name__}: {cause}"

        message = message or f"Could not resolve image: {_preview(reference, 60)}"
        super().__init__(message, error_details)
        self.reference = reference
        self.cause = cause


class ConfigurationError(RentalDocsError):

    def __init__(
        self,
        message: str,
        config_key: Optional[str] = None,
        expected_type: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None
    ):
        """Catalog or configuration defect; not recoverable from user data

        Args:
            message: Error message
            config_key: Offending configuration key
            expected_type: Expected type for the key
            details: Additional details
        """
        error_details = details or {}
        if config_key:
            error_details['config_key'] = config_key
        if expected_type:
            error_details['expected_type'] = expected_type

        super().__init__(message, error_details)
        self.config_key = config_key
        self.expected_type = expected_type


class UnknownBookingCategoryError(ConfigurationError):

    def __init__(self, label: Any):
        super().__init__(
            f"Unknown booking category: {label!r}",
            config_key='booking_category',
            expected_type='BookingCategory'
        )
        self.label = label


class LayoutError(RentalDocsError):

    def __init__(self, message: str, geometry: Optional[Dict[str, Any]] = None):
        """Malformed layout geometry (column widths, row shapes, coordinates)"""
        super().__init__(message, {'geometry': geometry} if geometry else None)
        self.geometry = geometry or {}


class RecordNotFoundError(RentalDocsError):

    def __init__(self, record_type: str, record_id: Optional[str] = None):
        message = f"{record_type.capitalize()} not found" + (f": {record_id}" if record_id else "")
        super().__init__(message, {'record_type': record_type, 'record_id': record_id})
        self.record_type = record_type
        self.record_id = record_id


class InvalidRecordError(RentalDocsError):

    def __init__(self, record_type: str, errors: Dict[str, Any]):
        """Stored record data could not be turned into a valid document"""
        super().__init__(f"Invalid {record_type} data", {'record_type': record_type, 'errors': errors})
        self.record_type = record_type
        self.errors = errors


class StorageError(RentalDocsError):

    def __init__(self, message: str, operation: Optional[str] = None, details: Optional[Dict[str, Any]] = None):
        error_details = details or {}
        if operation:
            error_details['operation'] = operation
        super().__init__(message, error_details)
        self.operation = operation


def handle_exception(
    error: Exception,
    operation: str = "",
    logger=None,
    reraise: bool = True
) -> Optional[Exception]:
    """Centralized exception handler

    Args:
        error: Exception to handle
        operation: Name of the operation that failed
        logger: Logger used to record the error
        reraise: Whether to re-raise the exception

    Returns:
        The exception when it is not re-raised
    """

    if logger:
        if isinstance(error, RentalDocsError):
            logger.error(
                f"Error in '{operation}': {error}",
                extra={'error_type': error.__class__.__name__, 'error_details': error.details}
            )
        else:
            logger.exception(f"Unexpected error in '{operation}': {error}")

    if reraise:
        raise error

    return error
