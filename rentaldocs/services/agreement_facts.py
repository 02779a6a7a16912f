"""Mapping from stored records to ``AgreementFacts``.

Records are plain dicts as the record store returns them. Both snake_case and
camelCase keys are accepted since bookings were written by two generations of
the checkout form.
"""

import json
from datetime import date
from typing import Any, Mapping, Optional, Sequence

from marshmallow import ValidationError

from ..compliance.recency import DateLike, parse_date
from ..config import Config
from ..models.data_models import AgreementFacts
from ..models.schemas import AgreementFactsSchema
from ..processors.legal_texts import INSURANCE_DECLARATION, TERMS_AND_CONDITIONS
from ..utils.exceptions import InvalidRecordError
from ..utils.image_fetchers import is_absolute_url

NOT_AVAILABLE = "N/A"
CUSTOMER_SIGNATURE_KEYS = ("customer_signature", "signature")
ADMIN_SIGNATURE_KEYS = ("admin_signature", "signature")


def format_date(value: DateLike) -> str:
    """en-GB ``DD/MM/YYYY``; "N/A" when absent, "Invalid Date" when unparseable."""
    if value is None or (isinstance(value, str) and not value.strip()):
        return NOT_AVAILABLE
    parsed = parse_date(value)
    return parsed.strftime("%d/%m/%Y") if parsed else "Invalid Date"


def _first(record: Optional[Mapping[str, Any]], *keys: str) -> Any:
    if not record:
        return None
    for key in keys:
        value = record.get(key)
        if value not in (None, ""):
            return value
    return None


def _text(value: Any, default: str = NOT_AVAILABLE) -> str:
    if value is None:
        return default
    text = str(value).strip()
    return text or default


def _clauses(value: Any) -> list:
    if not value:
        return list(TERMS_AND_CONDITIONS)
    if isinstance(value, str):
        return [value]
    return [str(clause) for clause in value]


def _is_image_reference(value: Any) -> bool:
    return isinstance(value, str) and (value.startswith("data:image") or is_absolute_url(value))


def signature_reference(value: Any, keys: Sequence[str] = CUSTOMER_SIGNATURE_KEYS) -> Optional[str]:
    """Pull an image reference out of a stored signature value.

    Accepts a data URL, an http(s) URL, a mapping or a JSON object string
    holding one of ``keys``. Anything else yields None.
    """
    if not value:
        return None

    if isinstance(value, Mapping):
        candidate = _first(value, *keys)
    else:
        text = str(value).strip()
        if _is_image_reference(text):
            return text
        try:
            parsed = json.loads(text)
        except ValueError:
            return None
        candidate = _first(parsed, *keys) if isinstance(parsed, dict) else None

    if isinstance(candidate, str) and _is_image_reference(candidate.strip()):
        return candidate.strip()
    return None


def build_agreement_facts(
    agreement: Mapping[str, Any],
    booking: Mapping[str, Any],
    vehicle: Optional[Mapping[str, Any]] = None,
    company: Optional[Mapping[str, Any]] = None,
    config: Optional[Config] = None,
    signed_date: Optional[DateLike] = None,
    include_signatures: bool = True
) -> AgreementFacts:
    config = config or Config()

    odometer = _first(agreement, "odometer_reading", "odometerReading", "odometer")
    description = " ".join(
        str(part).strip() for part in (_first(vehicle, "brand", "make"), _first(vehicle, "name", "model")) if part
    )

    payload = {
        "company": {
            "name": _text(_first(company, "company_name", "name"), config.COMPANY_NAME),
            "address": _text(_first(company, "address", "company_address"), config.COMPANY_ADDRESS),
            "phone": _text(_first(company, "phone", "company_phone"), config.COMPANY_PHONE),
            "email": _text(_first(company, "email", "company_email"), config.COMPANY_EMAIL),
            "logo_path": _first(company, "logo_url", "logoUrl"),
        },
        "customer": {
            "name": _text(_first(booking, "customer_name", "customerName")),
            "email": _text(_first(booking, "customer_email", "customerEmail")),
            "phone": _text(_first(booking, "customer_phone", "customerPhone")),
            "license_number": _text(_first(booking, "driving_license_number", "drivingLicenseNumber")),
            "address": _text(_first(booking, "customer_address", "customerAddress")),
        },
        "vehicle": {
            "description": _text(description),
            "registration": _text(
                _first(agreement, "vehicle_registration", "vehicleRegistration")
                or _first(vehicle, "registration_number", "registrationNumber", "registration")
            ),
            "odometer": f"{odometer} km" if odometer not in (None, "") else NOT_AVAILABLE,
            "fuel": _text(_first(agreement, "fuel_level", "fuelLevel")),
        },
        "rental": {
            "pickup_date": format_date(_first(booking, "pickup_date", "pickupDate")),
            "pickup_time": _text(_first(booking, "pickup_time", "pickupTime")),
            "dropoff_date": format_date(_first(booking, "dropoff_date", "dropoffDate")),
            "dropoff_time": _text(_first(booking, "dropoff_time", "dropoffTime")),
            "pickup_location": _text(_first(booking, "pickup_location", "pickupLocation")),
            "dropoff_location": _text(_first(booking, "dropoff_location", "dropoffLocation")),
        },
        "insurance_text": _text(_first(agreement, "insurance_text"), INSURANCE_DECLARATION),
        "clauses": _clauses(_first(agreement, "terms", "clauses")),
        "agreement_number": _text(
            _first(agreement, "agreement_number", "agreementNumber"), f"AGR-{_text(agreement.get('id'), 'DRAFT')}"
        ),
        "created_date": format_date(_first(agreement, "created_at", "createdAt") or date.today()),
    }

    if include_signatures:
        payload.update({
            "customer_signature": signature_reference(
                _first(agreement, "customer_signature_data", "customer_signature"), CUSTOMER_SIGNATURE_KEYS),
            "admin_signature": signature_reference(
                _first(agreement, "admin_signature_data", "admin_signature"), ADMIN_SIGNATURE_KEYS),
            "customer_name_signed": _first(agreement, "customer_name_signed", "customerNameSigned"),
            "admin_name": _first(agreement, "admin_name", "adminName"),
            "signed_date": format_date(signed_date) if signed_date else None,
        })

    try:
        return AgreementFactsSchema().load(payload)
    except ValidationError as e:
        raise InvalidRecordError("agreement", e.messages)
