"""Ports for the collaborators the services depend on.

Implementations are blocking; services call them from worker threads.
"""

from abc import ABC, abstractmethod
from typing import Any, Dict, Mapping, Optional

Record = Dict[str, Any]


class FileStorage(ABC):
    """Binary object storage (bucket, CDN, local disk)."""

    @abstractmethod
    def upload(self, data: bytes, content_type: str, filename: Optional[str] = None) -> str:
        """
        Store a file.

        Args:
            data: File content.
            content_type: MIME type.
            filename: Suggested object name.

        Returns:
            A URL from which the file can be fetched.
        """
        ...

    @abstractmethod
    def fetch(self, url: str) -> bytes:
        ...


class RecordStore(ABC):
    """Read/write access to agreement, booking, vehicle and company records.

    Getters return ``None`` for unknown ids.
    """

    @abstractmethod
    def get_agreement(self, agreement_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    def get_booking(self, booking_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    def get_vehicle(self, vehicle_id: str) -> Optional[Record]:
        ...

    @abstractmethod
    def get_company_settings(self) -> Optional[Record]:
        ...

    @abstractmethod
    def update_agreement(self, agreement_id: str, fields: Mapping[str, Any]) -> None:
        ...

    @abstractmethod
    def update_booking_status(self, booking_id: str, status: str) -> None:
        ...
