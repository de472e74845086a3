"""
Configuration Module.

Plan tier tables; runtime settings live in ``claimdesk.core.config``.
"""

from claimdesk.config.plans import (
    DEFAULT_PLAN_TABLE_PATH,
    PlanTable,
    PlanTier,
    get_plan_table,
    load_plan_table,
)

__all__ = [
    "DEFAULT_PLAN_TABLE_PATH",
    "PlanTable",
    "PlanTier",
    "get_plan_table",
    "load_plan_table",
]
