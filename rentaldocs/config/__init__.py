from .settings import Config, config
from .logging_config import quiet_external_loggers, suppress_external_warnings

__all__ = ['Config', 'config', 'quiet_external_loggers', 'suppress_external_warnings']
