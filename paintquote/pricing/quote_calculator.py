"""
Interior painting quote calculator.

Input: QuoteRequest (measurements, paint products, pricing rates, options)
Output: Quote dict: materials, labor, subtotal, overhead, markup, tax, total,
        timeline.

Gallons are rounded UP per surface. Trim is the exception: door and window
gallons are summed as fractions and rounded once, so two half-gallon jobs
buy one gallon, not two.
"""

import logging
import math
from datetime import date
from typing import Optional

from pydantic import ValidationError

from ..config import settings
from ..schemas import QuoteRequest
from .pricing_config import PricingConfig, create_default_config, get_product_by_grade
from .rate_resolver import apply_adjustments, resolve_adjustments

logger = logging.getLogger(__name__)

HOURS_PER_DAY = 8


class QuoteInputError(ValueError):
    """Raised when a quote request has invalid (e.g. negative) values."""


def estimate_timeline(total_hours: float):
    """
    Working days and a human label for a number of labor hours.

    1 day -> "1 day", 2-3 -> "N days", 4-5 -> "1 week", else "N weeks" (5-day weeks).
    """
    days = math.ceil(total_hours / HOURS_PER_DAY)
    if days <= 1:
        return max(days, 0), "1 day"
    if days <= 3:
        return days, f"{days} days"
    if days <= 5:
        return days, "1 week"
    return days, f"{math.ceil(days / 5)} weeks"


class QuoteCalculator:
    """
    Turns measurements + adjusted rates + product specs into a priced quote.

    The pricing config supplies the multiplier tables (season, location, prep,
    complexity, ceiling height, rush) and the per-grade product catalog.
    """

    # Two coats plus ~10% overlap/waste, instead of a naive 2.0
    TWO_COATS_MULTIPLIER = 1.8

    # Default spread rates
    DEFAULT_PRIMER_SPREAD = 250       # sqft/gal
    DEFAULT_WALL_SPREAD = 375         # sqft/gal
    DEFAULT_CEILING_SPREAD = 350      # sqft/gal
    DEFAULT_DOORS_PER_GALLON = 4.5    # both sides, two coats
    DEFAULT_WINDOWS_PER_GALLON = 2.5

    # Default paint costs ($/gal)
    DEFAULT_PRIMER_COST = 25
    DEFAULT_WALL_PAINT_COST = 35
    DEFAULT_CEILING_PAINT_COST = 30
    DEFAULT_TRIM_PAINT_COST = 40

    DEFAULT_OVERHEAD_PERCENT = 10
    DEFAULT_MARKUP_PERCENT = 20

    # Productivity: only drives the timeline, cost comes from the per-unit rates
    PRODUCTIVITY = {
        "walls": 150,       # sqft per hour
        "ceilings": 100,    # sqft per hour
        "primer": 200,      # sqft per hour
        "doors": 2,         # hours per door
        "windows": 3,       # hours per window
    }

    def __init__(self, pricing_config: Optional[PricingConfig] = None):
        self.pricing_config = pricing_config or create_default_config(0)

    def calculate(self, request, today: Optional[date] = None) -> dict:
        """
        Price a quote request.

        Args:
            request: QuoteRequest, or a dict in the same shape
            today: date used to pick the season when options.season is unset

        Returns:
            Quote dict:
            {
                materials: {primer?, wall_paint?, ceiling_paint?, trim_paint?, total},
                labor: {primer?, walls?, ceilings?, doors?, windows?, total,
                        total_hours, adjustments},
                adjustments: {seasonal, location, rush, prep, complexity, height, total, season},
                subtotal, overhead, markup, tax, total,
                timeline, timeline_days,
                internal_review: {total_with_overhead_markup, profit_margin},
                breakdown: [str, ...],
            }
        """
        request = self._coerce(request)
        m = request.measurements
        products = request.paint_products
        rates = request.pricing_rates
        grade = request.options.product_grade

        adjustments = resolve_adjustments(
            self.pricing_config, request.options.to_pricing_options(), today,
        )

        materials = {}
        labor = {}
        materials_total = 0.0
        labor_total = 0.0
        labor_hours = 0.0

        wall_sqft = self._wall_sqft(m)

        # --- Primer (walls only, single coat) ---
        if request.needs_primer and wall_sqft > 0:
            spec = self._product(products.primer if products else None, "primer", grade,
                                 "Standard Primer", self.DEFAULT_PRIMER_SPREAD,
                                 self.DEFAULT_PRIMER_COST)
            gallons = math.ceil(wall_sqft / spec["spread_rate"])
            cost = gallons * spec["cost_per_gallon"]
            materials["primer"] = {
                "sqft": wall_sqft,
                "gallons": gallons,
                "cost": cost,
                "product": spec["name"],
            }
            rate = apply_adjustments(
                self._rate(rates.primer_per_sqft, settings.FALLBACK_PRIMER_RATE, "primer_per_sqft"),
                adjustments,
            )
            hours = wall_sqft / self.PRODUCTIVITY["primer"]
            labor["primer"] = {"sqft": wall_sqft, "rate": rate, "cost": wall_sqft * rate, "hours": hours}
            materials_total += cost
            labor_total += wall_sqft * rate
            labor_hours += hours

        # --- Walls ---
        if self._selected(request, "walls") and wall_sqft > 0:
            spec = self._product(products.walls if products else None, "wall_paint", grade,
                                 "Wall Paint", self.DEFAULT_WALL_SPREAD,
                                 self.DEFAULT_WALL_PAINT_COST)
            gallons = self.two_coat_gallons(wall_sqft, spec["spread_rate"])
            cost = gallons * spec["cost_per_gallon"]
            materials["wall_paint"] = {
                "sqft": wall_sqft,
                "gallons": gallons,
                "cost": cost,
                "product": spec["name"],
            }
            rate = apply_adjustments(
                self._rate(rates.walls_per_sqft, settings.FALLBACK_WALL_RATE, "walls_per_sqft"),
                adjustments,
            )
            hours = wall_sqft / self.PRODUCTIVITY["walls"]
            labor["walls"] = {"sqft": wall_sqft, "rate": rate, "cost": wall_sqft * rate, "hours": hours}
            materials_total += cost
            labor_total += wall_sqft * rate
            labor_hours += hours

        # --- Ceilings ---
        ceiling_sqft = m.ceiling_sqft or 0
        if self._selected(request, "ceilings") and ceiling_sqft > 0:
            spec = self._product(products.ceiling if products else None, "ceiling_paint", grade,
                                 "Ceiling Paint", self.DEFAULT_CEILING_SPREAD,
                                 self.DEFAULT_CEILING_PAINT_COST)
            gallons = self.two_coat_gallons(ceiling_sqft, spec["spread_rate"])
            cost = gallons * spec["cost_per_gallon"]
            materials["ceiling_paint"] = {
                "sqft": ceiling_sqft,
                "gallons": gallons,
                "cost": cost,
                "product": spec["name"],
            }
            rate = apply_adjustments(
                self._rate(rates.ceilings_per_sqft, settings.FALLBACK_CEILING_RATE, "ceilings_per_sqft"),
                adjustments,
            )
            hours = ceiling_sqft / self.PRODUCTIVITY["ceilings"]
            labor["ceilings"] = {"sqft": ceiling_sqft, "rate": rate, "cost": ceiling_sqft * rate, "hours": hours}
            materials_total += cost
            labor_total += ceiling_sqft * rate
            labor_hours += hours

        # --- Doors + windows share one trim paint bucket ---
        doors = m.doors or 0
        windows = m.windows or 0
        paint_doors = self._selected(request, "doors") and doors > 0
        paint_windows = self._selected(request, "windows") and windows > 0

        if paint_doors or paint_windows:
            trim_spec = products.trim if products else None
            trim_product = self._product(trim_spec, "trim_paint", grade, "Trim Paint",
                                         None, self.DEFAULT_TRIM_PAINT_COST)
            trim_gallons = 0.0

            if paint_doors:
                per_gallon = (trim_spec and trim_spec.doors_per_gallon) or self.DEFAULT_DOORS_PER_GALLON
                trim_gallons += doors / per_gallon
                rate = apply_adjustments(
                    self._rate(rates.doors_per_unit, settings.FALLBACK_DOOR_RATE, "doors_per_unit"),
                    adjustments,
                )
                hours = doors * self.PRODUCTIVITY["doors"]
                labor["doors"] = {"count": doors, "rate": rate, "cost": doors * rate, "hours": hours}
                labor_total += doors * rate
                labor_hours += hours

            if paint_windows:
                per_gallon = (trim_spec and trim_spec.windows_per_gallon) or self.DEFAULT_WINDOWS_PER_GALLON
                trim_gallons += windows / per_gallon
                rate = apply_adjustments(
                    self._rate(rates.windows_per_unit, settings.FALLBACK_WINDOW_RATE, "windows_per_unit"),
                    adjustments,
                )
                hours = windows * self.PRODUCTIVITY["windows"]
                labor["windows"] = {"count": windows, "rate": rate, "cost": windows * rate, "hours": hours}
                labor_total += windows * rate
                labor_hours += hours

            gallons = math.ceil(trim_gallons)
            cost = gallons * trim_product["cost_per_gallon"]
            materials["trim_paint"] = {
                "doors_count": doors if paint_doors else 0,
                "windows_count": windows if paint_windows else 0,
                "gallons": gallons,
                "cost": cost,
                "product": trim_product["name"],
            }
            materials_total += cost

        materials["total"] = materials_total
        labor["total"] = labor_total
        labor["total_hours"] = labor_hours
        labor["adjustments"] = adjustments

        totals = self.apply_totals(
            materials_total + labor_total,
            overhead_percent=request.overhead_percent,
            markup_percent=request.markup_percent,
            tax_rate=request.tax_rate,
            minimum_job_price=request.minimum_job_price,
        )
        timeline_days, timeline = estimate_timeline(labor_hours)

        logger.debug("Quote priced: materials=%.2f labor=%.2f total=%.2f",
                     materials_total, labor_total, totals["total"])

        return {
            "materials": materials,
            "labor": labor,
            "adjustments": adjustments,
            **totals,
            "timeline": timeline,
            "timeline_days": timeline_days,
            "breakdown": self.breakdown_lines(materials, labor),
        }

    def breakdown_lines(self, materials: dict, labor: dict) -> list:
        """One readable line per priced surface."""
        lines = []
        for label, material_key, labor_key in (
            ("Primer", "primer", "primer"),
            ("Walls", "wall_paint", "walls"),
            ("Ceilings", "ceiling_paint", "ceilings"),
        ):
            item = materials.get(material_key)
            if not item:
                continue
            lines.append(
                f"{label}: {item['sqft']:g} sq ft, {item['gallons']} gal {item['product']} "
                f"(${item['cost']:,.2f}), labor ${labor[labor_key]['cost']:,.2f}"
            )
        for label, key in (("Doors", "doors"), ("Windows", "windows")):
            if key in labor:
                lines.append(f"{label}: {labor[key]['count']:g} @ ${labor[key]['rate']:,.2f}, "
                             f"labor ${labor[key]['cost']:,.2f}")
        trim = materials.get("trim_paint")
        if trim:
            lines.append(f"Trim paint: {trim['gallons']} gal {trim['product']} (${trim['cost']:,.2f})")
        return lines

    def two_coat_gallons(self, sqft: float, spread_rate: float) -> int:
        """Gallons for two coats: ceil((sqft / spread) x 1.8)."""
        return math.ceil((sqft / spread_rate) * self.TWO_COATS_MULTIPLIER)

    def apply_totals(self, subtotal: float, overhead_percent=None, markup_percent=None,
                     tax_rate=None, minimum_job_price=None) -> dict:
        """
        subtotal -> overhead, markup, tax, total.

        The minimum job price is a floor on the final, after-tax total.
        """
        if overhead_percent is None:
            overhead_percent = self.DEFAULT_OVERHEAD_PERCENT
        if markup_percent is None:
            markup_percent = self.DEFAULT_MARKUP_PERCENT

        overhead = subtotal * (overhead_percent / 100.0)
        markup = subtotal * (markup_percent / 100.0)
        before_tax = subtotal + overhead + markup
        tax = before_tax * ((tax_rate or 0) / 100.0)
        total = max(before_tax + tax, minimum_job_price or 0)

        return {
            "subtotal": subtotal,
            "overhead": overhead,
            "markup": markup,
            "tax": tax,
            "total": total,
            "internal_review": {
                "total_with_overhead_markup": before_tax,
                "profit_margin": overhead + markup,
            },
        }

    # --- Helpers ---

    def _coerce(self, request) -> QuoteRequest:
        if isinstance(request, QuoteRequest):
            return request
        try:
            return QuoteRequest.model_validate(request or {})
        except ValidationError as e:
            raise QuoteInputError(str(e)) from e

    def _wall_sqft(self, m) -> float:
        """Linear feet x ceiling height when both are given, else wall_sqft."""
        if m.linear_feet_walls and m.ceiling_height:
            return m.linear_feet_walls * m.ceiling_height
        return m.wall_sqft or 0

    def _selected(self, request: QuoteRequest, surface: str) -> bool:
        if request.surfaces is None:
            return True
        return getattr(request.surfaces, surface)

    def _rate(self, value, fallback: float, name: str) -> float:
        if value is None:
            logger.debug("No %s rate supplied, using fallback %.2f", name, fallback)
            return fallback
        return value

    def _product(self, spec, product_type: str, grade, default_name: str,
                 default_spread, default_cost) -> dict:
        """
        Resolve name / spread rate / cost for one surface.

        Caller-supplied values win, then the catalog product for the requested
        grade, then the built-in defaults.
        """
        name, spread, cost = default_name, default_spread, default_cost
        if grade:
            catalog = get_product_by_grade(self.pricing_config, product_type, grade)
            if catalog is not None:
                name, cost = catalog.name, catalog.cost_per_gallon
                if default_spread is not None:
                    spread = catalog.spread_rate
        if spec is not None:
            name = spec.name or name
            if getattr(spec, "spread_rate", None):
                spread = spec.spread_rate
            if spec.cost_per_gallon is not None:
                cost = spec.cost_per_gallon
        return {"name": name, "spread_rate": spread, "cost_per_gallon": cost}
