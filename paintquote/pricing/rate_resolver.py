"""
Rate adjustment resolver.

base rate x seasonal x location x prep x complexity x height x rush = effective rate.

Rush is applied last, so a rush rate is always exactly the non-rush rate
times the rush multiplier.

Unknown bucket values resolve to a neutral 1.0 and log a warning instead of
raising: a quote with one unrecognised option still gets priced.
"""

import logging
from dataclasses import dataclass
from datetime import date
from typing import Dict, Optional

from .pricing_config import PricingConfig, bucket_key, get_current_season

logger = logging.getLogger(__name__)

# Order the multipliers are applied and shown in
ADJUSTMENT_ORDER = ("seasonal", "location", "prep", "complexity", "height", "rush")


@dataclass
class PricingOptions:
    """Situational options for one job. Bucket fields take enum members or strings."""
    product_grade: Optional[str] = None
    location_type: Optional[str] = None
    custom_location: Optional[str] = None
    season: Optional[str] = None
    is_rush_job: bool = False
    prep_work: Optional[str] = None
    complexity: Optional[str] = None
    ceiling_height: Optional[str] = None


def _lookup(table, bucket, dimension: str) -> float:
    value = table.get(bucket)
    if value is None:
        logger.warning("Unknown %s bucket %r: applying neutral multiplier", dimension, bucket_key(bucket))
        return 1.0
    return value


def resolve_adjustments(config: PricingConfig, options: Optional[PricingOptions] = None,
                        today: Optional[date] = None) -> Dict:
    """
    Itemized multipliers for a set of options.

    Returns a dict with one multiplier per dimension in ADJUSTMENT_ORDER, the
    product of all of them as "total", and the season that was used.
    """
    options = options or PricingOptions()

    season = options.season or get_current_season(today)
    seasonal = _lookup(config.seasonal_pricing, season, "season")

    location = 1.0
    custom_areas = config.location_pricing.custom_areas
    if options.custom_location and options.custom_location in custom_areas:
        location = custom_areas[options.custom_location]
    elif options.location_type:
        location = _lookup(config.location_pricing, options.location_type, "location")

    rush = config.rush_job_multiplier if options.is_rush_job else 1.0

    prep = 1.0
    if options.prep_work:
        prep = _lookup(config.prep_work_multipliers, options.prep_work, "prep work")

    complexity = 1.0
    if options.complexity:
        complexity = _lookup(config.complexity_multipliers, options.complexity, "complexity")

    height = 1.0
    if options.ceiling_height:
        height = _lookup(config.height_multipliers, options.ceiling_height, "ceiling height")

    adjustments = {
        "seasonal": seasonal,
        "location": location,
        "prep": prep,
        "complexity": complexity,
        "height": height,
        "rush": rush,
    }
    total = 1.0
    for key in ADJUSTMENT_ORDER:
        total *= adjustments[key]
    adjustments["total"] = total
    adjustments["season"] = bucket_key(season)
    return adjustments


def apply_adjustments(base_rate: float, adjustments: Dict) -> float:
    """Multiply a base rate through already-resolved adjustments, in order."""
    rate = base_rate
    for key in ADJUSTMENT_ORDER:
        rate *= adjustments[key]
    return rate


def calculate_adjusted_rate(base_rate: float, config: PricingConfig,
                            options: Optional[PricingOptions] = None,
                            today: Optional[date] = None) -> float:
    """Effective rate for a base per-unit rate. > 0 whenever base_rate > 0."""
    adjustments = resolve_adjustments(config, options, today)
    rate = apply_adjustments(base_rate, adjustments)
    logger.debug("Adjusted rate %.4f -> %.4f (x%.4f)", base_rate, rate, adjustments["total"])
    return rate
