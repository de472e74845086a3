"""
Pytest Configuration and Fixtures.
Shared test fixtures for all test modules.
"""

from datetime import date, datetime, timezone
from decimal import Decimal

import pytest
import pytest_asyncio

from claimdesk.core.config import BrokerageSettings
from claimdesk.core.enums import ClaimStatus, PolicyStatus, ProductType
from claimdesk.schemas.claim import Claim, ClaimSubmission
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product
from claimdesk.services.adapters.memory_store import InMemoryRecordStore
from claimdesk.services.claims_service import ClaimsService

FIXED_NOW = datetime(2024, 6, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def clock():
    """Clock frozen at FIXED_NOW."""
    return lambda: FIXED_NOW


@pytest.fixture
def settings():
    """Settings with defaults only (no .env, no environment overrides)."""
    return BrokerageSettings(_env_file=None)


@pytest.fixture
def motor_product():
    """MOTOR product with a base premium of 100 and two exclusions."""
    return Product(
        name="Motor Comprehensive",
        type=ProductType.MOTOR,
        base_premium=Decimal("100.00"),
        exclusions=["racing", "Drunk Driving"],
    )


@pytest.fixture
def health_product():
    """HEALTH product without exclusions."""
    return Product(
        name="Health Plus",
        type=ProductType.HEALTH,
        base_premium=Decimal("1200.00"),
        exclusions=[],
    )


@pytest.fixture
def active_policy(motor_product):
    """Active MOTOR policy, premium 100, calendar year 2024."""
    return Policy(
        policy_number="POL-TEST-0001",
        product_id=motor_product.id,
        policyholder_id="customer-1",
        premium=Decimal("100.00"),
        start_date=date(2024, 1, 1),
        end_date=date(2024, 12, 31),
        status=PolicyStatus.ACTIVE,
    )


@pytest.fixture
def valid_submission():
    """Submission that passes every eligibility check against active_policy."""
    return ClaimSubmission(
        claim_type=ProductType.MOTOR,
        amount=Decimal("450.00"),
        incident_date=date(2024, 6, 1),
        description="Rear-ended at a traffic light",
    )


@pytest.fixture
def submitted_claim(active_policy):
    """Freshly submitted claim for 450."""
    return Claim(
        policy_id=active_policy.id,
        claimant_id="customer-1",
        claim_type=ProductType.MOTOR,
        amount=Decimal("450.00"),
        incident_date=date(2024, 6, 1),
        description="Rear-ended at a traffic light",
        status=ClaimStatus.SUBMITTED,
    )


@pytest.fixture
def in_review_claim(submitted_claim):
    """Claim already under assessment."""
    return submitted_claim.model_copy(
        update={"status": ClaimStatus.IN_REVIEW, "assessed_at": FIXED_NOW}
    )


@pytest_asyncio.fixture
async def memory_store(motor_product, active_policy):
    """In-memory store seeded with the MOTOR product and its active policy."""
    store = InMemoryRecordStore()
    await store.add_product(motor_product)
    await store.add_policy(active_policy)
    return store


@pytest.fixture
def claims_service(memory_store, settings):
    """Claims service over the seeded in-memory store."""
    return ClaimsService(memory_store, settings=settings)


# Configure pytest markers
def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test"
    )
    config.addinivalue_line(
        "markers", "slow: mark test as slow running"
    )
