from .exceptions import (RentalDocsError, ImageResolutionError, ConfigurationError, UnknownBookingCategoryError,
                         LayoutError, RecordNotFoundError, InvalidRecordError, StorageError, handle_exception)
from .validators import is_blank, sanitize_log_data
from .logging_config import setup_logging, get_logger, log_performance, LoggerMixin
from .image_fetchers import ImageFetcher, InlineImageFetcher, LocalAssetFetcher, HttpImageFetcher
from .image_resolver import ImageResolver, build_image_resolver

__all__ = ['RentalDocsError', 'ImageResolutionError', 'ConfigurationError', 'UnknownBookingCategoryError',
           'LayoutError', 'RecordNotFoundError', 'InvalidRecordError', 'StorageError', 'handle_exception', 'is_blank',
           'sanitize_log_data', 'setup_logging', 'get_logger', 'log_performance', 'LoggerMixin',
           'ImageFetcher', 'InlineImageFetcher', 'LocalAssetFetcher', 'HttpImageFetcher',
           'ImageResolver', 'build_image_resolver']
