import asyncio
from datetime import date
from typing import Any, Dict, Optional, Tuple

from ..config import Config
from ..models.data_models import ComposedDocument, GenerationResult
from ..processors.agreement_compositor import AgreementCompositor
from ..utils.exceptions import RecordNotFoundError, StorageError
from ..utils.logging_config import LoggerMixin, log_performance
from .agreement_facts import build_agreement_facts
from .interfaces import FileStorage, RecordStore

SIGNED_STATUS = "signed"
ON_RENT_STATUS = "On Rent"


class AgreementService(LoggerMixin):
    """Generates signed agreement PDFs and records where they were stored."""

    def __init__(
        self,
        records: RecordStore,
        storage: FileStorage,
        compositor: AgreementCompositor,
        config: Optional[Config] = None
    ):
        self.records = records
        self.storage = storage
        self.compositor = compositor
        self.config = config or Config()

    async def _load_records(self, agreement_id: str) -> Tuple[Dict[str, Any], Dict[str, Any], Optional[Dict[str, Any]], Optional[Dict[str, Any]]]:
        agreement = await asyncio.to_thread(self.records.get_agreement, agreement_id)
        if not agreement:
            raise RecordNotFoundError("agreement", agreement_id)

        booking_id = agreement.get("booking_id") or agreement.get("bookingId")
        booking = await asyncio.to_thread(self.records.get_booking, booking_id) if booking_id else None
        if not booking:
            raise RecordNotFoundError("booking", booking_id)

        vehicle_id = booking.get("car_id") or booking.get("carId") or booking.get("vehicle_id")
        vehicle = await asyncio.to_thread(self.records.get_vehicle, vehicle_id) if vehicle_id else None
        if not vehicle:
            raise RecordNotFoundError("vehicle", vehicle_id)

        company = await asyncio.to_thread(self.records.get_company_settings)
        return agreement, booking, vehicle, company

    async def _upload(self, document: ComposedDocument, agreement_id: str) -> str:
        try:
            url = await asyncio.to_thread(
                self.storage.upload, document.content, self.config.AGREEMENT_CONTENT_TYPE, document.filename
            )
        except Exception as e:
            raise StorageError(f"Failed to upload signed agreement: {e}", operation="upload",
                               details={'agreement_id': agreement_id}) from e
        if not url:
            raise StorageError("Storage returned no URL for the signed agreement", operation="upload",
                               details={'agreement_id': agreement_id})
        return url

    async def generate_signed_agreement(self, agreement_id: str, deadline: Optional[float] = None) -> GenerationResult:
        """Compose, store and record the signed agreement.

        Args:
            agreement_id: Agreement record id
            deadline: Per-image resolution deadline in seconds

        Returns:
            GenerationResult with the stored document URL

        Raises:
            RecordNotFoundError: Agreement, booking or vehicle missing
            StorageError: Upload or record update failed
        """
        with log_performance("generate_signed_agreement", self.logger, agreement_id=agreement_id):
            agreement, booking, vehicle, company = await self._load_records(agreement_id)
            facts = build_agreement_facts(agreement, booking, vehicle, company, self.config,
                                          signed_date=date.today())

            document = await self.compositor.compose(facts, timeout=deadline)
            url = await self._upload(document, agreement_id)

            try:
                await asyncio.to_thread(
                    self.records.update_agreement, agreement_id,
                    {"signed_agreement_url": url, "status": SIGNED_STATUS}
                )
                booking_id = agreement.get("booking_id") or agreement.get("bookingId")
                await asyncio.to_thread(self.records.update_booking_status, booking_id, ON_RENT_STATUS)
            except Exception as e:
                raise StorageError(f"Failed to record signed agreement: {e}", operation="update_records",
                                   details={'agreement_id': agreement_id}) from e

        self.log_operation("signed_agreement_stored", agreement_id=agreement_id,
                           page_count=document.page_count, degraded=[d.element for d in document.degradations])
        return GenerationResult(agreement_id=agreement_id, document_url=url, document=document)

    async def preview_agreement(self, agreement_id: str, deadline: Optional[float] = None) -> ComposedDocument:
        """Compose the agreement without signatures; nothing is stored or updated."""
        agreement, booking, vehicle, company = await self._load_records(agreement_id)
        facts = build_agreement_facts(agreement, booking, vehicle, company, self.config, include_signatures=False)
        return await self.compositor.compose(facts, timeout=deadline)
