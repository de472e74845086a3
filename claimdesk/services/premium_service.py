"""
Premium Rating Engine.

Computes a quoted premium from a product's base premium and the
applicant metadata captured on the quote request. Loadings apply in a
fixed order, each step working on the already-adjusted premium:

    1. age > 50           -> x 1.20
    2. smoker             -> x 1.30
    3. vehicleValue       -> + vehicleValue x 0.01
    4. tripDuration       -> + tripDuration x 2

The result is rounded half-up to cents. Missing or unusable metadata
fields are skipped; rating never fails.
"""

import logging
from dataclasses import dataclass
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation
from typing import Any, Mapping, Optional

logger = logging.getLogger(__name__)

CENTS = Decimal("0.01")

# Metadata keys as sent by the quote forms, plus snake_case spellings.
AGE_KEYS = ("age",)
SMOKER_KEYS = ("smoker",)
VEHICLE_VALUE_KEYS = ("vehicleValue", "vehicle_value")
TRIP_DURATION_KEYS = ("tripDuration", "trip_duration")

_FALSE_STRINGS = {"", "0", "false", "no", "n", "off"}


@dataclass(frozen=True)
class RatingFactors:
    """Loadings and rates used by the rating engine."""

    senior_age_threshold: int = 50
    senior_loading: Decimal = Decimal("1.20")
    smoker_loading: Decimal = Decimal("1.30")
    vehicle_value_rate: Decimal = Decimal("0.01")
    trip_daily_rate: Decimal = Decimal("2")

    @classmethod
    def from_settings(cls, settings=None) -> "RatingFactors":
        """Build factors from ``BrokerageSettings``."""
        if settings is None:
            from claimdesk.core.config import get_settings

            settings = get_settings()
        return cls(
            senior_age_threshold=settings.SENIOR_AGE_THRESHOLD,
            senior_loading=settings.SENIOR_LOADING,
            smoker_loading=settings.SMOKER_LOADING,
            vehicle_value_rate=settings.VEHICLE_VALUE_RATE,
            trip_daily_rate=settings.TRIP_DAILY_RATE,
        )


DEFAULT_FACTORS = RatingFactors()


def _lookup(metadata: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = metadata.get(key)
        if value is not None:
            return value
    return None


def _to_decimal(value: Any) -> Optional[Decimal]:
    """Coerce a metadata value to Decimal, or None when it isn't numeric."""
    if value is None or isinstance(value, bool):
        return None
    try:
        return Decimal(str(value).strip())
    except (InvalidOperation, ValueError):
        logger.debug(f"Ignoring non-numeric rating input: {value!r}")
        return None


def _is_truthy(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() not in _FALSE_STRINGS
    return bool(value)


def round_money(amount: Decimal) -> Decimal:
    """Round to cents, half-up."""
    return amount.quantize(CENTS, rounding=ROUND_HALF_UP)


def compute_premium(
    base_premium: Decimal,
    metadata: Optional[Mapping[str, Any]] = None,
    factors: Optional[RatingFactors] = None,
) -> Decimal:
    """
    Compute the quoted premium.

    Args:
        base_premium: Product base premium
        metadata: Applicant metadata (age, smoker, vehicleValue, tripDuration)
        factors: Rating loadings; defaults to the standard tariff

    Returns:
        Premium rounded to 2 decimal places
    """
    metadata = metadata or {}
    factors = factors or DEFAULT_FACTORS
    premium = Decimal(str(base_premium))

    age = _to_decimal(_lookup(metadata, AGE_KEYS))
    if age is not None and age > factors.senior_age_threshold:
        premium *= factors.senior_loading

    if _is_truthy(_lookup(metadata, SMOKER_KEYS)):
        premium *= factors.smoker_loading

    vehicle_value = _to_decimal(_lookup(metadata, VEHICLE_VALUE_KEYS))
    if vehicle_value:
        premium += vehicle_value * factors.vehicle_value_rate

    trip_duration = _to_decimal(_lookup(metadata, TRIP_DURATION_KEYS))
    if trip_duration:
        premium += trip_duration * factors.trip_daily_rate

    result = round_money(premium)
    logger.debug(f"Rated premium {base_premium} -> {result}")
    return result
