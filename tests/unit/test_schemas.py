"""
Unit Tests for Pydantic Schemas
Tests payload validation at model construction
"""

from datetime import date
from decimal import Decimal

import pytest
from pydantic import ValidationError

from claimdesk.core.enums import AuditAction, ClaimStatus, ProductType
from claimdesk.schemas import Attachment, ClaimSubmission, Policy, Product, QuoteRequest


@pytest.mark.unit
class TestProduct:
    """Test product schema"""

    def test_lower_case_type(self):
        product = Product(name="Trip", type="travel", base_premium=Decimal("25.00"))
        assert product.type == ProductType.TRAVEL

    def test_base_premium_positive(self):
        with pytest.raises(ValidationError):
            Product(name="Free", type="LIFE", base_premium=Decimal("0"))

    def test_unknown_type(self):
        with pytest.raises(ValidationError):
            Product(name="Pets", type="PET", base_premium=Decimal("10"))

    def test_blank_exclusions_dropped(self):
        product = Product(
            name="Home", type="HOME", base_premium=Decimal("80"), exclusions=[" flood ", "", "  "]
        )
        assert product.exclusions == ["flood"]


@pytest.mark.unit
class TestPolicy:
    """Test policy schema"""

    def test_end_after_start(self, active_policy):
        data = active_policy.model_dump()
        data["end_date"] = data["start_date"]
        with pytest.raises(ValidationError, match="end date must be after start date"):
            Policy(**data)

    def test_covers_inclusive(self, active_policy):
        assert active_policy.covers(date(2024, 1, 1))
        assert active_policy.covers(date(2024, 12, 31))
        assert not active_policy.covers(date(2025, 1, 1))


@pytest.mark.unit
class TestClaimSubmission:
    """Test claim payload schema"""

    def _data(self, **overrides):
        data = {
            "claim_type": "MOTOR",
            "amount": "250.00",
            "incident_date": "2024-06-01",
            "description": "Hail damage",
        }
        data.update(overrides)
        return data

    def test_parses_strings(self):
        payload = ClaimSubmission(**self._data())
        assert payload.amount == Decimal("250.00")
        assert payload.incident_date == date(2024, 6, 1)

    @pytest.mark.parametrize("amount", ["0", "-5"])
    def test_amount_positive(self, amount):
        with pytest.raises(ValidationError):
            ClaimSubmission(**self._data(amount=amount))

    def test_unparseable_date(self):
        with pytest.raises(ValidationError):
            ClaimSubmission(**self._data(incident_date="yesterday"))

    def test_blank_description(self):
        with pytest.raises(ValidationError):
            ClaimSubmission(**self._data(description=""))

    def test_unknown_claim_type(self):
        with pytest.raises(ValidationError):
            ClaimSubmission(**self._data(claim_type="PET"))

    def test_claim_type_outside_catalogue(self):
        """Test that a type no product offers fails on the field, not as a mismatch message"""
        with pytest.raises(ValidationError) as exc_info:
            ClaimSubmission(**self._data(claim_type="DENTAL"))

        errors = exc_info.value.errors()
        assert len(errors) == 1
        assert errors[0]["loc"] == ("claim_type",)
        assert errors[0]["type"] == "enum"


@pytest.mark.unit
class TestMisc:
    """Test remaining schemas and enum helpers"""

    def test_attachment_defaults(self):
        attachment = Attachment(filename="invoice.pdf")
        assert attachment.mimetype == "application/octet-stream"
        assert attachment.size is None

    def test_quote_request_metadata(self):
        assert QuoteRequest(product_id="p-1").metadata == {}

    @pytest.mark.parametrize("status", list(ClaimStatus))
    def test_audit_action_for_every_claim_status(self, status):
        assert AuditAction.for_claim_status(status).value == f"CLAIM_{status.value}"
