import logging
import warnings
from typing import Optional, List

DEFAULT_EXTERNAL_LIBS = ['PIL', 'urllib3', 'pdfminer']
DEFAULT_WARNING_PATTERNS = [".*DecompressionBombWarning.*", ".*Image size .* exceeds limit.*"]


def quiet_external_loggers(external_libs: Optional[List[str]] = None, level: int = logging.WARNING):
    libs_to_quiet = external_libs or DEFAULT_EXTERNAL_LIBS
    [logging.getLogger(lib).setLevel(level) for lib in libs_to_quiet]


def suppress_external_warnings(warning_patterns: Optional[List[str]] = None):
    patterns = warning_patterns or DEFAULT_WARNING_PATTERNS
    [warnings.filterwarnings("ignore", message=pattern) for pattern in patterns]
