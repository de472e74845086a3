"""
Plan/Coverage Resolver.

Maps a policy's premium onto its product's plan ladder and reports the
tier's per-claim coverage ceiling. The result is advisory: it feeds the
``coverage_info`` returned on submission and never decides whether a
claim is admissible.
"""

import logging
from decimal import Decimal
from typing import Optional

from claimdesk.config.plans import PlanTable, PlanTier, get_plan_table
from claimdesk.core.enums import ProductType
from claimdesk.schemas.claim import CoverageInfo
from claimdesk.schemas.policy import Policy
from claimdesk.schemas.product import Product

logger = logging.getLogger(__name__)


def determine_plan(
    product_type: ProductType,
    policy_premium: Decimal,
    plan_table: Optional[PlanTable] = None,
) -> Optional[PlanTier]:
    """
    Find the plan tier a premium falls into.

    Args:
        product_type: Product category of the policy
        policy_premium: Premium fixed on the policy
        plan_table: Tier table; the configured table when omitted

    Returns:
        Highest tier whose ``min_premium`` does not exceed the premium,
        or None when the product type has no plan ladder
    """
    table = plan_table or get_plan_table()
    selected: Optional[PlanTier] = None
    for tier in table.tiers_for(product_type):
        if tier.min_premium <= policy_premium:
            selected = tier
        else:
            break

    if selected is None:
        logger.debug(f"No plan tier for {product_type.value} at premium {policy_premium}")
    return selected


def get_coverage_limit(
    plan: Optional[PlanTier],
    product_type: ProductType,
    claim_type: ProductType,
) -> Optional[Decimal]:
    """
    Get the coverage ceiling of a plan for a claim type.

    Returns:
        The ceiling, or None when unlimited. A claim type other than the
        product's own has no ceiling of its own and also yields None.
    """
    if plan is None or claim_type != product_type:
        return None
    return plan.claim_limit


def build_coverage_info(
    policy: Policy,
    product: Product,
    claimed_amount: Decimal,
    claim_type: Optional[ProductType] = None,
    plan_table: Optional[PlanTable] = None,
) -> CoverageInfo:
    """Assemble the advisory coverage readout for a claim."""
    claim_type = claim_type or product.type
    plan = determine_plan(product.type, policy.premium, plan_table)
    limit = get_coverage_limit(plan, product.type, claim_type)

    remaining = None
    if limit is not None:
        remaining = max(Decimal("0"), limit - claimed_amount)

    return CoverageInfo(
        plan_name=plan.name if plan else None,
        product_type=product.type,
        policy_premium=policy.premium,
        coverage_limit=limit,
        claimed_amount=claimed_amount,
        remaining_coverage=remaining,
        unlimited=plan is not None and plan.is_unlimited and claim_type == product.type,
    )
