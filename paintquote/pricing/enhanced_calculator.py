"""
Productivity-based estimator: prices a job from labor hours.

Where QuoteCalculator charges per-unit rates (sqft, door, window), this
estimator turns surfaces into hours using shop productivity standards, then
hours x the company's hourly rate. Used for quick ranges and for companies
that price by the hour.

Input: EstimateRequest + QuoteCalculatorSettings + PricingConfig
Output: Estimate dict (materials, labor, totals, timeline, breakdown)
"""

import logging
import math
from datetime import date
from typing import Optional

from ..schemas import EstimateRequest
from .pricing_config import PricingConfig
from .quote_calculator import estimate_timeline
from .rate_resolver import ADJUSTMENT_ORDER, PricingOptions, resolve_adjustments

logger = logging.getLogger(__name__)

# Customer prep wording -> prep work bucket
PREP_CONDITION_MAP = {
    "good": "none",
    "minor": "light",
    "major": "heavy",
}


def map_prep_condition(condition: Optional[str]) -> str:
    """'good' | 'minor' | 'major' -> prep bucket. Unset or unknown -> 'light'."""
    return PREP_CONDITION_MAP.get(condition or "", "light")


class EnhancedQuoteCalculator:
    """Hour-based estimate using a company's resolved settings."""

    # sqft (or linear ft) per hour, hours per unit for doors/windows
    PRODUCTIVITY_RATES = {
        "walls": 150,
        "ceilings": 100,
        "trim": 60,
        "doors": 2,
        "windows": 3,
        "priming": 200,
    }

    GALLON_MULTIPLIER = 1.8     # multiple coats
    SUPPLIES_BASE = 100.00      # brushes, rollers, drop cloths, tape

    def pricing_options(self, request: EstimateRequest) -> PricingOptions:
        details = request.project_details
        return PricingOptions(
            product_grade=details.paint_quality,
            location_type=details.location_type,
            custom_location=details.custom_location,
            season=details.season,
            is_rush_job=details.rush_job,
            prep_work=map_prep_condition(details.prep_condition),
            complexity=details.complexity,
            ceiling_height=details.ceiling_height,
        )

    def calculate(self, request: EstimateRequest, calc_settings, pricing_config: PricingConfig,
                  company_name: str = "", today: Optional[date] = None) -> dict:
        """
        Build the estimate.

        Args:
            request: EstimateRequest (surfaces, product overrides, project details)
            calc_settings: QuoteCalculatorSettings for the company
            pricing_config: the company's PricingConfig (multiplier tables)
            company_name: shown in used_settings
            today: date used for the default season

        Returns:
            Estimate dict:
            {
                materials: {paint, primer, supplies, total},
                labor: {hours, base_hours, rate, base_total, adjusted_total,
                        adjustments, hour_breakdown},
                subtotal, overhead, profit, before_tax, tax, total,
                timeline, timeline_days, adjustments_summary, breakdown,
                used_settings,
            }
        """
        overrides = request.overrides
        hourly_rate = calc_settings.base_hourly_rate
        tax_rate = calc_settings.tax_rate
        profit_margin = calc_settings.profit_margin
        if overrides is not None:
            if overrides.labor_rate is not None:
                hourly_rate = overrides.labor_rate
            if overrides.tax_rate is not None:
                tax_rate = overrides.tax_rate
            if overrides.markup_percentage is not None:
                profit_margin = overrides.markup_percentage

        adjustments = resolve_adjustments(pricing_config, self.pricing_options(request), today)

        materials, surface_lines = self._materials(request, calc_settings)
        labor = self._labor(request, hourly_rate, adjustments)

        subtotal = materials["total"] + labor["adjusted_total"]
        overhead = subtotal * (calc_settings.overhead_percent / 100.0)
        profit = subtotal * (profit_margin / 100.0)
        before_tax = subtotal + overhead + profit
        tax = before_tax * (tax_rate / 100.0)
        total = max(before_tax + tax, calc_settings.minimum_job_price)

        timeline_days, timeline = estimate_timeline(labor["hours"])

        breakdown = dict(surface_lines)
        breakdown["supplies"] = {
            "description": "Brushes, rollers, drop cloths, tape, etc.",
            "cost": materials["supplies"],
        }
        breakdown["labor"] = {
            "base_hours": labor["base_hours"],
            "adjusted_hours": labor["hours"],
            "breakdown": labor["hour_breakdown"],
        }

        summary = {f"{key}_multiplier": adjustments[key] for key in ADJUSTMENT_ORDER}
        summary["total_multiplier"] = adjustments["total"]

        logger.info("Estimate for %s: %.1f hours, total %.2f",
                    company_name or "company", labor["hours"], total)

        return {
            "materials": materials,
            "labor": labor,
            "subtotal": subtotal,
            "overhead": overhead,
            "profit": profit,
            "before_tax": before_tax,
            "tax": tax,
            "total": total,
            "timeline": timeline,
            "timeline_days": timeline_days,
            "adjustments_summary": summary,
            "breakdown": breakdown,
            "used_settings": {
                "company_name": company_name,
                "paint_products": [p.product_name for p in calc_settings.paint_products],
                "labor_rate": hourly_rate,
                "tax_rate": tax_rate,
                "overhead_percent": calc_settings.overhead_percent,
                "profit_margin": profit_margin,
            },
        }

    def quick_estimate(self, calc_settings, pricing_config: PricingConfig, wall_sqft: float,
                       ceiling_sqft: float = 0.0, paint_quality: str = "standard",
                       company_name: str = "", today: Optional[date] = None) -> dict:
        """Low / high / recommended range for a walls (+ ceilings) job."""
        request = EstimateRequest.model_validate({
            "surfaces": {"walls": wall_sqft, "ceilings": ceiling_sqft or 0},
            "project_details": {
                "paint_quality": paint_quality,
                "prep_condition": "good",
                "complexity": "standard",
            },
        })
        base = self.calculate(request, calc_settings, pricing_config, company_name, today)["total"]
        return {
            "low": round(base * 0.85),
            "high": round(base * 1.25),
            "recommended": round(base),
        }

    # --- Helpers ---

    def _override(self, request: EstimateRequest, key: str):
        if request.paint_products is None:
            return None
        return getattr(request.paint_products, key)

    def _materials(self, request: EstimateRequest, calc_settings):
        s = request.surfaces
        paint_cost = 0.0
        primer_cost = 0.0
        lines = {}

        if s.walls:
            o = self._override(request, "walls")
            coverage = (o and o.coverage_rate) or calc_settings.walls_coverage
            cost = o.cost_per_gallon if o and o.cost_per_gallon is not None else calc_settings.walls_paint_cost
            gallons = math.ceil((s.walls / coverage) * self.GALLON_MULTIPLIER)
            paint_cost += gallons * cost
            lines["walls"] = {"sqft": s.walls, "gallons": gallons, "cost": gallons * cost}

        if s.ceilings:
            o = self._override(request, "ceiling")
            coverage = (o and o.coverage_rate) or calc_settings.ceilings_coverage
            cost = o.cost_per_gallon if o and o.cost_per_gallon is not None else calc_settings.ceilings_paint_cost
            gallons = math.ceil((s.ceilings / coverage) * self.GALLON_MULTIPLIER)
            paint_cost += gallons * cost
            lines["ceilings"] = {"sqft": s.ceilings, "gallons": gallons, "cost": gallons * cost}

        if s.priming:
            o = self._override(request, "primer")
            coverage = (o and o.coverage_rate) or calc_settings.primer_coverage
            cost = o.cost_per_gallon if o and o.cost_per_gallon is not None else calc_settings.primer_cost
            gallons = math.ceil(s.priming / coverage)
            primer_cost += gallons * cost
            lines["primer"] = {"sqft": s.priming, "gallons": gallons, "cost": gallons * cost}

        # Trim, doors and windows are priced through labor only
        if s.trim:
            lines["trim"] = {"linear_ft": s.trim, "cost": 0.0}
        if s.doors:
            lines["doors"] = {"count": s.doors, "cost": 0.0}
        if s.windows:
            lines["windows"] = {"count": s.windows, "cost": 0.0}

        supplies = self.SUPPLIES_BASE + (paint_cost + primer_cost) * (calc_settings.sundries_percentage / 100.0)
        materials = {
            "paint": paint_cost,
            "primer": primer_cost,
            "supplies": supplies,
            "total": paint_cost + primer_cost + supplies,
        }
        return materials, lines

    def _labor(self, request: EstimateRequest, hourly_rate: float, adjustments: dict) -> dict:
        s = request.surfaces
        rates = self.PRODUCTIVITY_RATES
        hours_by_surface = {}

        if s.walls:
            hours_by_surface["walls"] = s.walls / rates["walls"]
        if s.ceilings:
            hours_by_surface["ceilings"] = s.ceilings / rates["ceilings"]
        if s.trim:
            hours_by_surface["trim"] = s.trim / rates["trim"]
        if s.doors:
            hours_by_surface["doors"] = s.doors * rates["doors"]
        if s.windows:
            hours_by_surface["windows"] = s.windows * rates["windows"]
        if s.priming:
            hours_by_surface["prep"] = s.priming / rates["priming"]

        base_hours = sum(hours_by_surface.values())
        adjusted_hours = base_hours * adjustments["total"]

        return {
            "hours": adjusted_hours,
            "base_hours": base_hours,
            "rate": hourly_rate,
            "base_total": base_hours * hourly_rate,
            "adjusted_total": adjusted_hours * hourly_rate,
            "adjustments": {key: adjustments[key] for key in ADJUSTMENT_ORDER},
            "hour_breakdown": hours_by_surface,
        }
