"""
Plan Tier Table.

Product type -> ordered premium bands, each naming a marketing tier and
its coverage ceilings. The table is configuration: the packaged default
can be replaced by pointing ``BROKERAGE_PLAN_TABLE_PATH`` at another
YAML file with the same shape.
"""

from decimal import Decimal
from functools import lru_cache
from pathlib import Path
from typing import Optional

import yaml
from pydantic import BaseModel, Field, ValidationError, field_validator

from claimdesk.core.enums import PlanTierName, ProductType
from claimdesk.utils.errors import ConfigurationError

DEFAULT_PLAN_TABLE_PATH = Path(__file__).parent / "plan_tiers.yaml"


class PlanTier(BaseModel):
    """One premium band of a product's plan ladder."""

    name: PlanTierName
    min_premium: Decimal = Field(..., ge=0, description="Lowest premium falling in this band")
    reference_premium: Decimal = Field(..., gt=0, description="Advertised list premium")
    claim_limit: Optional[Decimal] = Field(
        None, gt=0, description="Per-claim ceiling; None means unlimited"
    )
    benefits: dict[str, Optional[Decimal]] = Field(default_factory=dict)

    @property
    def is_unlimited(self) -> bool:
        return self.claim_limit is None

    @property
    def display_name(self) -> str:
        """Human-readable tier name ("ULTRA_PREMIUM" -> "Ultra Premium")."""
        return self.name.value.replace("_", " ").title()


class PlanTable(BaseModel):
    """Plan ladders keyed by product type."""

    products: dict[ProductType, list[PlanTier]] = Field(default_factory=dict)

    @field_validator("products")
    @classmethod
    def validate_ladders(
        cls, v: dict[ProductType, list[PlanTier]]
    ) -> dict[ProductType, list[PlanTier]]:
        """Each ladder starts at 0, ascends strictly and names each tier once."""
        for product_type, tiers in v.items():
            if not tiers:
                raise ValueError(f"{product_type.value}: at least one tier is required")
            if tiers[0].min_premium != 0:
                raise ValueError(f"{product_type.value}: first tier must start at 0")
            names = [tier.name for tier in tiers]
            if len(set(names)) != len(names):
                raise ValueError(f"{product_type.value}: duplicate tier names")
            for lower, upper in zip(tiers, tiers[1:]):
                if upper.min_premium <= lower.min_premium:
                    raise ValueError(
                        f"{product_type.value}: tiers must ascend by min_premium "
                        f"({lower.name.value} >= {upper.name.value})"
                    )
        return v

    def tiers_for(self, product_type: ProductType) -> list[PlanTier]:
        """Get the plan ladder for a product type (empty if unconfigured)."""
        return self.products.get(product_type, [])


def load_plan_table(path: str | Path | None = None) -> PlanTable:
    """Load and validate a plan table from YAML.

    Args:
        path: YAML file; the packaged default table when omitted

    Returns:
        Validated plan table

    Raises:
        ConfigurationError: If the file is missing or malformed
    """
    path = Path(path) if path else DEFAULT_PLAN_TABLE_PATH
    if not path.exists():
        raise ConfigurationError(f"Plan table not found: {path}")

    with open(path, encoding="utf-8") as f:
        try:
            data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Plan table {path} is not valid YAML: {e}") from e

    if not isinstance(data, dict):
        raise ConfigurationError(f"Plan table {path} must map product types to tiers")

    try:
        return PlanTable(products=data)
    except ValidationError as e:
        raise ConfigurationError(f"Invalid plan table {path}: {e}") from e


@lru_cache(maxsize=8)
def _cached_plan_table(path: str) -> PlanTable:
    return load_plan_table(path)


def get_plan_table(settings=None) -> PlanTable:
    """Get the plan table named by ``settings`` (global settings when omitted), cached per path."""
    if settings is None:
        from claimdesk.core.config import get_settings

        settings = get_settings()

    path = settings.PLAN_TABLE_PATH or str(DEFAULT_PLAN_TABLE_PATH)
    return _cached_plan_table(path)
