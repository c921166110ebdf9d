"""
Shared test fixtures — test client and sample rate records.
"""

import pytest
from fastapi.testclient import TestClient

from tradie_rates.main import app
from tradie_rates.schemas import BusinessProfile, JobRates, RateTemplate


@pytest.fixture
def client():
    """FastAPI test client."""
    return TestClient(app)


@pytest.fixture
def sample_job():
    return JobRates(trade_type="Plasterer", rate_template_id="tpl-1", callout_fee=110)


@pytest.fixture
def sample_template():
    return RateTemplate(
        id="tpl-1", user_id="user-1", name="Residential",
        trade_type="Plasterer", property_type="residential",
        hourly_rate=90, rate_per_m2_interior=32, material_markup_percent=15,
    )


@pytest.fixture
def sample_profile():
    return BusinessProfile(
        hourly_rate=80, callout_fee=95, day_rate=600,
        gst_registered=True, default_margin_pct=22, default_deposit_pct=30,
        default_payment_terms="14 days",
        trade_rates_json='{"plastering": {"cornice": 14}}',
    )
