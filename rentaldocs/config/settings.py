import os
from pathlib import Path
from dataclasses import dataclass
from typing import Optional, List, Tuple


def _env_list(name: str, default: str) -> List[str]:
    raw = os.getenv(name, default)
    return [item.strip() for item in raw.split(',') if item.strip()]


@dataclass
class Config:
    RECENCY_WINDOW_MONTHS: int = 3
    MAX_UPLOAD_SIZE_MB: int = 10

    FALLBACK_IMAGE_WIDTH: int = 200
    FALLBACK_IMAGE_HEIGHT: int = 200
    IMAGE_FETCH_TIMEOUT_SECONDS: float = 10.0
    SITE_ORIGIN: Optional[str] = None
    STATIC_ROOT: Path = Path("public")

    LOGO_PATH: str = "/sed.jpg"
    LOGO_FALLBACK_PATHS: List[str] = None

    COMPANY_NAME: str = "Sedulous Group LTD"
    COMPANY_ADDRESS: str = "200 Burnt Oak Broadway, Edgware, HA8 0AP, United Kingdom"
    COMPANY_PHONE: str = "020 8952 6908"
    COMPANY_EMAIL: str = "info@sedulousgroupltd.co.uk"

    AGREEMENT_CONTENT_TYPE: str = "application/pdf"

    LOGS_DIR: Path = Path("logs")
    LOG_LEVEL: str = "INFO"
    LOG_MAX_BYTES: int = 10_000_000
    LOG_BACKUP_COUNT: int = 5

    def __post_init__(self):
        if self.LOGO_FALLBACK_PATHS is None:
            self.LOGO_FALLBACK_PATHS = _env_list(
                'RENTALDOCS_LOGO_FALLBACK_PATHS',
                '/sed.jpg,/images/dna-group-logo.png,/dna-group-logo.png,dna-group-logo.png')
        self.STATIC_ROOT = Path(self.STATIC_ROOT)
        self.LOGS_DIR = Path(self.LOGS_DIR)

    @classmethod
    def from_env(cls) -> 'Config':
        return cls(
            RECENCY_WINDOW_MONTHS=int(os.getenv('RENTALDOCS_RECENCY_WINDOW_MONTHS', '3')),
            MAX_UPLOAD_SIZE_MB=int(os.getenv('RENTALDOCS_MAX_UPLOAD_SIZE_MB', '10')),
            FALLBACK_IMAGE_WIDTH=int(os.getenv('RENTALDOCS_FALLBACK_IMAGE_WIDTH', '200')),
            FALLBACK_IMAGE_HEIGHT=int(os.getenv('RENTALDOCS_FALLBACK_IMAGE_HEIGHT', '200')),
            IMAGE_FETCH_TIMEOUT_SECONDS=float(os.getenv('RENTALDOCS_IMAGE_FETCH_TIMEOUT', '10')),
            SITE_ORIGIN=os.getenv('RENTALDOCS_SITE_ORIGIN') or None,
            STATIC_ROOT=Path(os.getenv('RENTALDOCS_STATIC_ROOT', 'public')),
            LOGO_PATH=os.getenv('RENTALDOCS_LOGO_PATH', '/sed.jpg'),
            COMPANY_NAME=os.getenv('RENTALDOCS_COMPANY_NAME', cls.COMPANY_NAME),
            COMPANY_ADDRESS=os.getenv('RENTALDOCS_COMPANY_ADDRESS', cls.COMPANY_ADDRESS),
            COMPANY_PHONE=os.getenv('RENTALDOCS_COMPANY_PHONE', cls.COMPANY_PHONE),
            COMPANY_EMAIL=os.getenv('RENTALDOCS_COMPANY_EMAIL', cls.COMPANY_EMAIL),
            LOGS_DIR=Path(os.getenv('RENTALDOCS_LOGS_DIR', 'logs')),
            LOG_LEVEL=os.getenv('RENTALDOCS_LOG_LEVEL', 'INFO'))

    @property
    def fallback_image_size(self) -> Tuple[int, int]:
        return self.FALLBACK_IMAGE_WIDTH, self.FALLBACK_IMAGE_HEIGHT

    @property
    def max_upload_bytes(self) -> int:
        return self.MAX_UPLOAD_SIZE_MB * 1024 * 1024

    def logo_candidates(self, preferred: Optional[str] = None) -> List[str]:
        """Ordered, de-duplicated logo paths: the caller's choice, the primary path, then fallbacks."""
        ordered = [preferred, self.LOGO_PATH, *self.LOGO_FALLBACK_PATHS]
        seen = set()
        return [path for path in ordered if path and not (path in seen or seen.add(path))]

    def validate(self) -> List[str]:
        errors = []
        if self.RECENCY_WINDOW_MONTHS <= 0:
            errors.append(f"Recency window must be positive: {self.RECENCY_WINDOW_MONTHS}")
        if self.FALLBACK_IMAGE_WIDTH <= 0 or self.FALLBACK_IMAGE_HEIGHT <= 0:
            errors.append(f"Fallback image size must be positive: {self.fallback_image_size}")
        if self.IMAGE_FETCH_TIMEOUT_SECONDS <= 0:
            errors.append(f"Image fetch timeout must be positive: {self.IMAGE_FETCH_TIMEOUT_SECONDS}")
        if self.SITE_ORIGIN and not self.SITE_ORIGIN.startswith(('http://', 'https://')):
            errors.append(f"Site origin must be an http(s) URL: {self.SITE_ORIGIN}")
        return errors

    def require_valid(self) -> 'Config':
        errors = self.validate()
        if errors:
            from ..utils.exceptions import ConfigurationError
            raise ConfigurationError("; ".join(errors), details={'errors': errors})
        return self


config = Config.from_env()
