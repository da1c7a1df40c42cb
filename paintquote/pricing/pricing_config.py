"""
Per-company pricing configuration: multiplier tables and paint catalogs.

Every multiplier dimension is a closed set of buckets. Each table is its own
model with one required field per bucket, so a config that loads is always
complete and strictly positive. Stored configs use camelCase keys
(seasonalPricing, highDetail, veryHigh ...); both spellings are accepted.
"""

import enum
import logging
from datetime import date, datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, NonNegativeFloat, PositiveFloat
from pydantic.alias_generators import to_camel

logger = logging.getLogger(__name__)


# --- Buckets ---

class Season(str, enum.Enum):
    SPRING = "spring"
    SUMMER = "summer"
    FALL = "fall"
    WINTER = "winter"


class LocationType(str, enum.Enum):
    URBAN = "urban"
    SUBURBAN = "suburban"
    RURAL = "rural"


class ProductGrade(str, enum.Enum):
    ECONOMY = "economy"
    STANDARD = "standard"
    PREMIUM = "premium"
    LUXURY = "luxury"


class PrepWork(str, enum.Enum):
    NONE = "none"
    LIGHT = "light"
    MODERATE = "moderate"
    HEAVY = "heavy"
    EXTREME = "extreme"


class Complexity(str, enum.Enum):
    SIMPLE = "simple"
    STANDARD = "standard"
    DETAILED = "detailed"
    HIGH_DETAIL = "highDetail"
    CUSTOM = "custom"


class CeilingHeight(str, enum.Enum):
    STANDARD = "standard"      # 8-10 ft
    HIGH = "high"              # 10-12 ft
    VERY_HIGH = "veryHigh"     # 12-16 ft
    CATHEDRAL = "cathedral"    # 16+ ft


class ProductType(str, enum.Enum):
    PRIMER = "primer"
    WALL_PAINT = "wall_paint"
    CEILING_PAINT = "ceiling_paint"
    TRIM_PAINT = "trim_paint"
    EXTERIOR_PAINT = "exterior_paint"
    SPECIALTY_PAINT = "specialty_paint"


# Month -> season (Mar-May spring, Jun-Aug summer, Sep-Nov fall, Dec-Feb winter)
_SEASON_BY_MONTH = {
    1: Season.WINTER, 2: Season.WINTER, 3: Season.SPRING,
    4: Season.SPRING, 5: Season.SPRING, 6: Season.SUMMER,
    7: Season.SUMMER, 8: Season.SUMMER, 9: Season.FALL,
    10: Season.FALL, 11: Season.FALL, 12: Season.WINTER,
}


def get_current_season(today: Optional[date] = None) -> Season:
    """Season for a calendar date (defaults to today)."""
    today = today or date.today()
    return _SEASON_BY_MONTH[today.month]


def bucket_key(value) -> str:
    """Plain string key for an enum member or raw string."""
    if isinstance(value, enum.Enum):
        return str(value.value)
    return str(value)


# --- Models ---

class _ConfigModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MultiplierTable(_ConfigModel):
    """Base for the bucket -> multiplier tables."""

    def get(self, bucket) -> Optional[float]:
        """Multiplier for a bucket, or None when the bucket is not in this table."""
        key = bucket_key(bucket)
        for name in type(self).model_fields:
            if key == name or key == to_camel(name):
                return getattr(self, name)
        return None

    def as_dict(self) -> Dict[str, float]:
        return self.model_dump(by_alias=True)


class SeasonalPricing(MultiplierTable):
    spring: PositiveFloat
    summer: PositiveFloat
    fall: PositiveFloat
    winter: PositiveFloat


class LocationPricing(MultiplierTable):
    urban: PositiveFloat
    suburban: PositiveFloat
    rural: PositiveFloat
    # Zip code or region name -> multiplier, checked before the generic buckets
    custom_areas: Dict[str, PositiveFloat] = Field(default_factory=dict)

    def get(self, bucket) -> Optional[float]:
        if bucket_key(bucket) in ("custom_areas", "customAreas"):
            return None
        return super().get(bucket)

    def as_dict(self) -> Dict[str, float]:
        return self.model_dump(by_alias=True, exclude={"custom_areas"})


class PrepWorkMultipliers(MultiplierTable):
    none: PositiveFloat
    light: PositiveFloat
    moderate: PositiveFloat
    heavy: PositiveFloat
    extreme: PositiveFloat


class ComplexityMultipliers(MultiplierTable):
    simple: PositiveFloat
    standard: PositiveFloat
    detailed: PositiveFloat
    high_detail: PositiveFloat
    custom: PositiveFloat


class HeightMultipliers(MultiplierTable):
    standard: PositiveFloat
    high: PositiveFloat
    very_high: PositiveFloat
    cathedral: PositiveFloat


class GradeProduct(_ConfigModel):
    name: str
    multiplier: PositiveFloat
    spread_rate: PositiveFloat      # sqft per gallon
    cost_per_gallon: NonNegativeFloat


class ProductGradePricing(_ConfigModel):
    economy: GradeProduct
    standard: GradeProduct
    premium: GradeProduct
    luxury: GradeProduct


class PaintProducts(_ConfigModel):
    primer: ProductGradePricing
    wall_paint: ProductGradePricing
    ceiling_paint: ProductGradePricing
    trim_paint: ProductGradePricing
    exterior_paint: Optional[ProductGradePricing] = None
    specialty_paint: Optional[ProductGradePricing] = None


class PaintSupplierConfig(_ConfigModel):
    preferred_suppliers: List[str] = Field(default_factory=list)
    products: PaintProducts


class BasePricingRates(_ConfigModel):
    """The contractor's own rates before any adjustment."""
    walls_per_sqft: NonNegativeFloat
    ceilings_per_sqft: NonNegativeFloat
    doors_per_unit: NonNegativeFloat
    windows_per_unit: NonNegativeFloat
    primer_per_sqft: NonNegativeFloat
    trim_per_linear_ft: NonNegativeFloat
    cabinet_doors_per_unit: Optional[NonNegativeFloat] = None
    stairway_spindles_per_unit: Optional[NonNegativeFloat] = None
    deck_per_sqft: Optional[NonNegativeFloat] = None
    fence_per_linear_ft: Optional[NonNegativeFloat] = None


class PricingConfig(_ConfigModel):
    company_id: int
    base_rates: BasePricingRates
    seasonal_pricing: SeasonalPricing
    location_pricing: LocationPricing
    paint_suppliers: PaintSupplierConfig
    overhead_percent: NonNegativeFloat
    profit_margin: NonNegativeFloat
    minimum_job_price: NonNegativeFloat
    rush_job_multiplier: PositiveFloat
    prep_work_multipliers: PrepWorkMultipliers
    complexity_multipliers: ComplexityMultipliers
    height_multipliers: HeightMultipliers
    last_updated: datetime = Field(default_factory=datetime.utcnow)


# --- Defaults ---

def _grades(economy, standard, premium, luxury) -> dict:
    """Build a grade table from (name, multiplier, spread_rate, cost) tuples."""
    out = {}
    for grade, (name, mult, spread, cost) in zip(
        ("economy", "standard", "premium", "luxury"),
        (economy, standard, premium, luxury),
    ):
        out[grade] = {
            "name": name,
            "multiplier": mult,
            "spread_rate": spread,
            "cost_per_gallon": cost,
        }
    return out


def create_default_config(company_id: int) -> PricingConfig:
    """Complete default config for a company without custom pricing."""
    return PricingConfig(
        company_id=company_id,
        base_rates={
            "walls_per_sqft": 1.50,
            "ceilings_per_sqft": 1.25,
            "doors_per_unit": 150,
            "windows_per_unit": 100,
            "primer_per_sqft": 0.45,
            "trim_per_linear_ft": 2.50,
            "cabinet_doors_per_unit": 75,
            "stairway_spindles_per_unit": 25,
            "deck_per_sqft": 2.00,
            "fence_per_linear_ft": 3.00,
        },
        seasonal_pricing={"spring": 1.05, "summer": 1.15, "fall": 1.05, "winter": 0.95},
        location_pricing={"urban": 1.2, "suburban": 1.0, "rural": 0.85},
        paint_suppliers={
            "preferred_suppliers": ["Sherwin-Williams", "Benjamin Moore", "Behr"],
            "products": {
                "primer": _grades(
                    ("Basic Primer", 0.8, 200, 20),
                    ("Standard Primer", 1.0, 250, 25),
                    ("Premium Primer", 1.3, 300, 35),
                    ("Luxury Primer", 1.6, 350, 45),
                ),
                "wall_paint": _grades(
                    ("Budget Paint", 0.8, 300, 25),
                    ("Standard Paint", 1.0, 350, 35),
                    ("Premium Paint", 1.3, 400, 50),
                    ("Designer Paint", 1.6, 450, 75),
                ),
                "ceiling_paint": _grades(
                    ("Ceiling White", 0.8, 350, 20),
                    ("Ceiling Paint", 1.0, 350, 30),
                    ("Premium Ceiling", 1.3, 400, 40),
                    ("Luxury Ceiling", 1.6, 450, 55),
                ),
                "trim_paint": _grades(
                    ("Basic Trim", 0.8, 150, 30),
                    ("Trim Paint", 1.0, 175, 40),
                    ("Premium Trim", 1.3, 200, 55),
                    ("Luxury Trim", 1.6, 225, 70),
                ),
            },
        },
        overhead_percent=15,
        profit_margin=30,
        minimum_job_price=500,
        rush_job_multiplier=1.25,
        prep_work_multipliers={
            "none": 1.0, "light": 1.1, "moderate": 1.25, "heavy": 1.5, "extreme": 1.75,
        },
        complexity_multipliers={
            "simple": 0.9, "standard": 1.0, "detailed": 1.2, "high_detail": 1.4, "custom": 1.6,
        },
        height_multipliers={
            "standard": 1.0, "high": 1.1, "very_high": 1.25, "cathedral": 1.5,
        },
    )


# --- Lookups ---

def _product_field(product_type) -> str:
    """'wallPaint', 'wall_paint' or ProductType.WALL_PAINT -> 'wall_paint'."""
    key = bucket_key(product_type)
    for name in PaintProducts.model_fields:
        if key == name or key == to_camel(name):
            return name
    return key


def get_product_by_grade(config: PricingConfig, product_type, grade) -> Optional[GradeProduct]:
    """
    Catalog product for a product type and grade.

    Returns None only when the product type is not in the catalog. An unknown
    grade falls back to the standard product.
    """
    field = _product_field(product_type)
    if field not in PaintProducts.model_fields:
        return None
    table = getattr(config.paint_suppliers.products, field)
    if table is None:
        return None

    key = bucket_key(grade)
    if key not in ProductGradePricing.model_fields:
        logger.warning("Unknown product grade %r: using standard %s", key, field)
        key = ProductGrade.STANDARD.value
    return getattr(table, key)
