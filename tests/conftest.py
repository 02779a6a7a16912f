from unittest.mock import MagicMock

import pytest
import requests

from rentaldocs.config import Config
from rentaldocs.models.data_models import (AgreementFacts, CompanyDetails, CustomerDetails, RentalWindow,
                                           VehicleDetails)
from rentaldocs.processors.legal_texts import INSURANCE_DECLARATION, TERMS_AND_CONDITIONS

from .helpers import make_data_url, make_image_bytes


@pytest.fixture
def png_bytes():
    return make_image_bytes()


@pytest.fixture
def signature_data_url():
    return make_data_url(120, 40)


@pytest.fixture
def test_config(tmp_path):
    static_root = tmp_path / "public"
    static_root.mkdir()
    return Config(
        STATIC_ROOT=static_root,
        LOGS_DIR=tmp_path / "logs",
        SITE_ORIGIN=None,
        IMAGE_FETCH_TIMEOUT_SECONDS=2.0,
        LOGO_PATH="/sed.jpg",
        LOGO_FALLBACK_PATHS=["/images/dna-group-logo.png", "dna-group-logo.png"],
    )


@pytest.fixture
def fake_session():
    """requests.Session stand-in whose get() fails unless told otherwise."""
    session = MagicMock(spec=requests.Session)
    session.get.side_effect = requests.ConnectionError("host unreachable")
    return session


@pytest.fixture
def sample_facts():
    return AgreementFacts(
        company=CompanyDetails(
            name="Sedulous Group LTD",
            address="200 Burnt Oak Broadway, Edgware, HA8 0AP, United Kingdom",
            phone="020 8952 6908",
            email="info@sedulousgroupltd.co.uk",
        ),
        customer=CustomerDetails(
            name="Jane Driver",
            email="jane@example.com",
            phone="07700 900123",
            license_number="DRIVE801015JD9AB",
            address="1 High Street, London",
        ),
        vehicle=VehicleDetails(description="Toyota Prius", registration="AB12 CDE", odometer="42000 km",
                               fuel="Full"),
        rental=RentalWindow(
            pickup_date="01/06/2024", pickup_time="10:00",
            dropoff_date="08/06/2024", dropoff_time="10:00",
            pickup_location="Edgware", dropoff_location="Edgware",
        ),
        insurance_text=INSURANCE_DECLARATION,
        clauses=TERMS_AND_CONDITIONS,
        agreement_number="AGR-1001",
        created_date="01/06/2024",
    )
