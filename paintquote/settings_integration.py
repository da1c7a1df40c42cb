"""
Company settings integration.

Pulls a company's stored settings, its paint products and its pricing config
into one resolved view, and feeds that view to the quote calculator and the
productivity estimator. Missing values fall back to shop defaults.

Resolved settings are cached per company in a SettingsCache owned by the app.
Anything that writes company data must invalidate that company's entry.
"""

import logging
import time
from dataclasses import dataclass, field
from datetime import date
from typing import Dict, List, Optional

from fastapi import Depends, Request
from sqlalchemy.orm import Session

from . import models, schemas
from .config import settings
from .config_store import PricingConfigStore
from .database import get_db
from .pricing.enhanced_calculator import EnhancedQuoteCalculator
from .pricing.pricing_config import (
    PricingConfig, ProductType, create_default_config, get_current_season, get_product_by_grade,
)
from .pricing.quote_calculator import QuoteCalculator
from .pricing.rate_resolver import PricingOptions, calculate_adjusted_rate

logger = logging.getLogger(__name__)

# Shop defaults when the company has not set a value
DEFAULT_HOURLY_RATE = 45.00
DEFAULT_LABOR_PERCENTAGE = 30
DEFAULT_WALLS_PAINT_COST = 30.00
DEFAULT_CEILINGS_PAINT_COST = 25.00
DEFAULT_TRIM_PAINT_COST = 35.00
DEFAULT_PAINT_COVERAGE = 350
DEFAULT_SUNDRIES_PERCENTAGE = 12
PRIMER_COVERAGE_FACTOR = 0.8      # primer covers less than finish paint
DEFAULT_GRADE = "standard"

# Paint product use_case values -> surface
USE_CASES = {
    "walls": ("walls", "wall"),
    "ceilings": ("ceilings", "ceiling"),
    "trim": ("trim",),
    "primer": ("primer",),
}


class CompanyNotFoundError(LookupError):
    """No company with the requested id."""


def _first(*values):
    """First value that is not None."""
    for value in values:
        if value is not None:
            return value
    return None


class SettingsCache:
    """
    Per-company cache of resolved settings with a fixed time-to-live.

    Expired entries are dropped on read and swept whenever a new entry is
    stored. The clock is injectable so expiry can be tested without sleeping.
    """

    def __init__(self, ttl_seconds: float = 300, clock=time.monotonic):
        self.ttl_seconds = ttl_seconds
        self.clock = clock
        self._entries: Dict[int, tuple] = {}

    def get(self, company_id: int):
        entry = self._entries.get(company_id)
        if entry is None:
            return None
        expires_at, value = entry
        if self.clock() > expires_at:
            # Another request may already have dropped it
            self._entries.pop(company_id, None)
            return None
        return value

    def set(self, company_id: int, value) -> None:
        now = self.clock()
        for key, (expires_at, _) in list(self._entries.items()):
            if now > expires_at:
                self._entries.pop(key, None)
        self._entries[company_id] = (now + self.ttl_seconds, value)

    def invalidate(self, company_id: int) -> None:
        self._entries.pop(company_id, None)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self):
        return len(self._entries)


@dataclass
class ComputedSettings:
    hourly_rate: float
    labor_percentage: float
    walls_paint_cost: float
    ceilings_paint_cost: float
    trim_paint_cost: float
    paint_coverage: float
    sundries_percentage: float
    tax_rate: float
    markup_percentage: float
    overhead_percent: float
    profit_margin: float
    minimum_job_price: float
    current_season_multiplier: float
    default_location_multiplier: float
    preferred_products: Dict[str, Optional[schemas.PaintProduct]] = field(default_factory=dict)


@dataclass
class CompanySettings:
    company: schemas.Company
    paint_products: List[schemas.PaintProduct]
    pricing_config: PricingConfig
    computed: ComputedSettings


@dataclass
class QuoteCalculatorSettings:
    base_hourly_rate: float
    hourly_rate: float              # base_hourly_rate with the job's adjustments applied
    labor_percentage: float
    walls_paint_cost: float
    ceilings_paint_cost: float
    trim_paint_cost: float
    primer_cost: float
    walls_coverage: float
    ceilings_coverage: float
    primer_coverage: float
    tax_rate: float
    markup_percentage: float
    overhead_percent: float
    profit_margin: float
    sundries_percentage: float
    minimum_job_price: float
    seasonal_multiplier: float
    location_multiplier: float
    rush_job_multiplier: float
    paint_products: List[schemas.PaintProduct] = field(default_factory=list)


class SettingsIntegrationService:
    """Resolves company settings and prices quotes with them."""

    def __init__(self, db: Session, cache: Optional[SettingsCache] = None):
        self.db = db
        self.cache = cache if cache is not None else SettingsCache(settings.SETTINGS_CACHE_SECONDS)

    # --- Settings ---

    def get_company_settings(self, company_id: int) -> CompanySettings:
        cached = self.cache.get(company_id)
        if cached is not None:
            return cached

        company = self.db.query(models.Company).filter(models.Company.id == company_id).first()
        if not company:
            raise CompanyNotFoundError(f"Company not found: {company_id}")

        products = self.db.query(models.PaintProduct).filter(
            models.PaintProduct.company_id == company_id
        ).order_by(models.PaintProduct.id).all()

        pricing_config = PricingConfigStore(self.db).load(company_id)
        if pricing_config is None:
            logger.debug("No stored pricing config for company %s, using defaults", company_id)
            pricing_config = create_default_config(company_id)

        # Snapshot rows so the cached value does not hold on to the session
        company_snapshot = schemas.Company.model_validate(company)
        product_snapshots = [schemas.PaintProduct.model_validate(p) for p in products]

        company_settings = CompanySettings(
            company=company_snapshot,
            paint_products=product_snapshots,
            pricing_config=pricing_config,
            computed=self._compute(company_snapshot, product_snapshots, pricing_config),
        )
        self.cache.set(company_id, company_settings)

        logger.info("Loaded settings for %s: %d paint products, hourly rate %.2f, tax %.2f%%",
                    company_snapshot.company_name, len(product_snapshots),
                    company_settings.computed.hourly_rate, company_settings.computed.tax_rate)
        return company_settings

    def get_quote_calculator_settings(self, company_id: int,
                                      options: Optional[PricingOptions] = None,
                                      today: Optional[date] = None) -> QuoteCalculatorSettings:
        options = options or PricingOptions()
        company_settings = self.get_company_settings(company_id)
        config = company_settings.pricing_config
        computed = company_settings.computed
        preferred = computed.preferred_products

        base_rate = computed.hourly_rate
        hourly_rate = calculate_adjusted_rate(base_rate, config, options, today)

        grade = options.product_grade
        walls_cost = self._paint_cost(preferred["walls"], ProductType.WALL_PAINT, grade,
                                      config, computed.walls_paint_cost)
        ceilings_cost = self._paint_cost(preferred["ceilings"], ProductType.CEILING_PAINT, grade,
                                         config, computed.ceilings_paint_cost)
        trim_cost = self._paint_cost(preferred["trim"], ProductType.TRIM_PAINT, grade,
                                     config, computed.trim_paint_cost)
        primer_cost = self._paint_cost(preferred["primer"], ProductType.PRIMER, grade or DEFAULT_GRADE,
                                       config, None)

        return QuoteCalculatorSettings(
            base_hourly_rate=base_rate,
            hourly_rate=hourly_rate,
            labor_percentage=computed.labor_percentage,
            walls_paint_cost=walls_cost,
            ceilings_paint_cost=ceilings_cost,
            trim_paint_cost=trim_cost,
            primer_cost=primer_cost,
            walls_coverage=self._coverage(preferred["walls"], computed.paint_coverage),
            ceilings_coverage=self._coverage(preferred["ceilings"], computed.paint_coverage),
            primer_coverage=self._coverage(preferred["primer"],
                                           computed.paint_coverage * PRIMER_COVERAGE_FACTOR),
            tax_rate=computed.tax_rate,
            markup_percentage=computed.markup_percentage,
            overhead_percent=computed.overhead_percent,
            profit_margin=computed.profit_margin,
            sundries_percentage=computed.sundries_percentage,
            minimum_job_price=computed.minimum_job_price,
            seasonal_multiplier=computed.current_season_multiplier,
            location_multiplier=computed.default_location_multiplier,
            rush_job_multiplier=config.rush_job_multiplier,
            paint_products=company_settings.paint_products,
        )

    def apply_pricing_multipliers(self, base_price: float, company_settings: CompanySettings,
                                  options: Optional[PricingOptions] = None,
                                  today: Optional[date] = None) -> float:
        return calculate_adjusted_rate(base_price, company_settings.pricing_config, options, today)

    def clear_cache(self, company_id: Optional[int] = None) -> None:
        if company_id is None:
            self.cache.clear()
        else:
            self.cache.invalidate(company_id)

    # --- Pricing ---

    def calculate_quote(self, company_id: int, request: schemas.QuoteRequest,
                        today: Optional[date] = None) -> dict:
        """
        Run the quote calculator with the company's rates filled in.

        Anything the request sets explicitly wins. Unset per-unit rates come
        from the pricing config's base rates, unset products from the
        company's preferred paint products, unset percentages from the
        company settings.
        """
        company_settings = self.get_company_settings(company_id)
        config = company_settings.pricing_config
        computed = company_settings.computed
        base = config.base_rates

        rates = request.pricing_rates.model_copy(update={
            name: getattr(base, name)
            for name in ("walls_per_sqft", "ceilings_per_sqft", "doors_per_unit",
                         "windows_per_unit", "primer_per_sqft")
            if getattr(request.pricing_rates, name) is None
        })

        products = request.paint_products or schemas.PaintProductSpecs()
        preferred = computed.preferred_products
        product_updates = {}
        for key, use_case in (("walls", "walls"), ("ceiling", "ceilings"), ("primer", "primer")):
            product = preferred[use_case]
            if getattr(products, key) is None and product is not None:
                product_updates[key] = schemas.PaintProductSpec(
                    name=product.product_name,
                    spread_rate=product.coverage_rate,
                    cost_per_gallon=product.cost_per_gallon,
                )
        if products.trim is None and preferred["trim"] is not None:
            product_updates["trim"] = schemas.TrimProductSpec(
                name=preferred["trim"].product_name,
                cost_per_gallon=preferred["trim"].cost_per_gallon,
            )
        products = products.model_copy(update=product_updates)

        filled = request.model_copy(update={
            "pricing_rates": rates,
            "paint_products": products,
            "overhead_percent": _first(request.overhead_percent, computed.overhead_percent),
            "markup_percent": _first(request.markup_percent, computed.markup_percentage),
            "tax_rate": _first(request.tax_rate, computed.tax_rate),
            "minimum_job_price": _first(request.minimum_job_price, computed.minimum_job_price),
        })

        quote = QuoteCalculator(config).calculate(filled, today=today)
        logger.info("Quote for %s: total %.2f", company_settings.company.company_name, quote["total"])
        return quote

    def estimate(self, company_id: int, request: schemas.EstimateRequest,
                 today: Optional[date] = None) -> dict:
        """Productivity-based estimate with the company's settings."""
        company_settings = self.get_company_settings(company_id)
        calc_settings = self.get_quote_calculator_settings(
            company_id, PricingOptions(product_grade=request.project_details.paint_quality), today,
        )
        return EnhancedQuoteCalculator().calculate(
            request, calc_settings, company_settings.pricing_config,
            company_name=company_settings.company.company_name, today=today,
        )

    def quick_estimate(self, company_id: int, request: schemas.QuickEstimateRequest,
                       today: Optional[date] = None) -> dict:
        company_settings = self.get_company_settings(company_id)
        calc_settings = self.get_quote_calculator_settings(
            company_id, PricingOptions(product_grade=request.paint_quality), today,
        )
        return EnhancedQuoteCalculator().quick_estimate(
            calc_settings, company_settings.pricing_config,
            wall_sqft=request.wall_sqft,
            ceiling_sqft=request.ceiling_sqft,
            paint_quality=request.paint_quality,
            company_name=company_settings.company.company_name,
            today=today,
        )

    # --- Helpers ---

    def _compute(self, company: schemas.Company, products: List[schemas.PaintProduct],
                 config: PricingConfig) -> ComputedSettings:
        preferred = {
            surface: next((p for p in products if p.use_case in use_cases), None)
            for surface, use_cases in USE_CASES.items()
        }

        def product_cost(surface):
            product = preferred[surface]
            return product.cost_per_gallon if product is not None else None

        return ComputedSettings(
            hourly_rate=_first(company.default_hourly_rate, DEFAULT_HOURLY_RATE),
            labor_percentage=_first(company.default_labor_percentage, DEFAULT_LABOR_PERCENTAGE),
            walls_paint_cost=_first(product_cost("walls"), company.default_walls_paint_cost,
                                    DEFAULT_WALLS_PAINT_COST),
            ceilings_paint_cost=_first(product_cost("ceilings"), company.default_ceilings_paint_cost,
                                       DEFAULT_CEILINGS_PAINT_COST),
            trim_paint_cost=_first(product_cost("trim"), company.default_trim_paint_cost,
                                   DEFAULT_TRIM_PAINT_COST),
            paint_coverage=_first(company.default_paint_coverage, DEFAULT_PAINT_COVERAGE),
            sundries_percentage=_first(company.default_sundries_percentage, DEFAULT_SUNDRIES_PERCENTAGE),
            tax_rate=_first(company.tax_rate, 0),
            markup_percentage=_first(company.markup_percentage, config.profit_margin),
            overhead_percent=_first(company.overhead_percent, config.overhead_percent),
            profit_margin=config.profit_margin,
            minimum_job_price=_first(company.minimum_job_size, config.minimum_job_price),
            current_season_multiplier=config.seasonal_pricing.get(get_current_season()),
            default_location_multiplier=config.location_pricing.suburban,
            preferred_products=preferred,
        )

    def _paint_cost(self, preferred: Optional[schemas.PaintProduct], product_type: ProductType,
                    grade: Optional[str], config: PricingConfig, default: Optional[float]) -> float:
        """
        Preferred company product, then the catalog product for the grade,
        then the company's own default cost.
        """
        if preferred is not None:
            return preferred.cost_per_gallon
        if grade or default is None:
            product = get_product_by_grade(config, product_type, grade or DEFAULT_GRADE)
            if product is not None:
                return product.cost_per_gallon
        return default if default is not None else QuoteCalculator.DEFAULT_PRIMER_COST

    def _coverage(self, preferred: Optional[schemas.PaintProduct], default: float) -> float:
        if preferred is not None and preferred.coverage_rate:
            return preferred.coverage_rate
        return default


# --- FastAPI dependencies ---

def get_settings_cache(request: Request) -> SettingsCache:
    return request.app.state.settings_cache


def get_settings_service(db: Session = Depends(get_db),
                         cache: SettingsCache = Depends(get_settings_cache)) -> SettingsIntegrationService:
    return SettingsIntegrationService(db, cache)
