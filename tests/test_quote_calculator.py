"""
Quote calculator tests: gallons, labor, totals, timeline.

Tests:
1-3.   Worked wall scenario (500 lf x 9 ft) + idempotence
4-6.   Gallon rounding: two coats, primer single coat, trim summed once
7-9.   Totals: overhead / markup / tax, minimum job floor after tax
10-12. Rates: fallbacks, adjustments, neutrality
13-15. Surface selection + product grade catalog
16-18. Input rejection + monotonicity
19-20. Timeline labels
"""

from datetime import date

import pytest

from paintquote.pricing.pricing_config import create_default_config
from paintquote.pricing.quote_calculator import QuoteCalculator, QuoteInputError, estimate_timeline
from paintquote.schemas import QuoteRequest


NEUTRAL_OPTIONS = {
    "season": "summer",
    "location_type": "suburban",
    "prep_work": "none",
    "complexity": "standard",
    "ceiling_height": "standard",
    "is_rush_job": False,
}


def _wall_request(**overrides):
    """500 lf x 9 ft of walls, $50/gal paint at 350 sqft/gal, $1.50/sqft labor."""
    data = {
        "measurements": {"linear_feet_walls": 500, "ceiling_height": 9},
        "paint_products": {"walls": {"name": "ProMar 200", "spread_rate": 350, "cost_per_gallon": 50}},
        "pricing_rates": {"walls_per_sqft": 1.50},
        "surfaces": {"walls": True},
        "options": NEUTRAL_OPTIONS,
    }
    data.update(overrides)
    return data


# --- Worked scenario ---

def test_wall_scenario_subtotal(neutral_config):
    quote = QuoteCalculator(neutral_config).calculate(_wall_request())
    walls = quote["materials"]["wall_paint"]
    assert walls["sqft"] == 4500
    assert walls["gallons"] == 24
    assert walls["cost"] == 1200
    assert walls["product"] == "ProMar 200"
    assert quote["labor"]["walls"]["cost"] == pytest.approx(6750)
    assert quote["subtotal"] == pytest.approx(7950)
    assert quote["breakdown"] == [
        "Walls: 4500 sq ft, 24 gal ProMar 200 ($1,200.00), labor $6,750.00",
    ]
    assert quote["adjustments"]["total"] == 1.0


def test_wall_scenario_totals(neutral_config):
    request = _wall_request(overhead_percent=10, markup_percent=20, tax_rate=5)
    quote = QuoteCalculator(neutral_config).calculate(request)
    assert quote["overhead"] == pytest.approx(795)
    assert quote["markup"] == pytest.approx(1590)
    assert quote["internal_review"]["total_with_overhead_markup"] == pytest.approx(10335)
    assert quote["internal_review"]["profit_margin"] == pytest.approx(2385)
    assert quote["tax"] == pytest.approx(516.75)
    assert quote["total"] == pytest.approx(10851.75)


def test_calculate_is_idempotent():
    calc = QuoteCalculator()
    request = _wall_request(options={**NEUTRAL_OPTIONS, "location_type": "urban"})
    assert calc.calculate(request) == calc.calculate(request)


# --- Gallons ---

def test_two_coat_gallons():
    calc = QuoteCalculator()
    assert calc.two_coat_gallons(4500, 350) == 24
    assert calc.two_coat_gallons(375, 375) == 2      # ceil(1.8)
    assert calc.two_coat_gallons(100, 350) == 1


def test_primer_single_coat_on_wall_area(neutral_config):
    request = _wall_request(needs_primer=True, pricing_rates={"walls_per_sqft": 1.5, "primer_per_sqft": 0.5})
    quote = QuoteCalculator(neutral_config).calculate(request)
    primer = quote["materials"]["primer"]
    assert primer["sqft"] == 4500
    assert primer["gallons"] == 18        # ceil(4500 / 250)
    assert primer["cost"] == 18 * 25
    assert primer["product"] == "Standard Primer"
    assert quote["labor"]["primer"]["cost"] == pytest.approx(2250)


def test_trim_gallons_summed_before_rounding(neutral_config):
    request = {
        "measurements": {"doors": 9, "windows": 1},
        "options": NEUTRAL_OPTIONS,
    }
    quote = QuoteCalculator(neutral_config).calculate(request)
    trim = quote["materials"]["trim_paint"]
    # 9 / 4.5 = 2.0 doors + 1 / 2.5 = 0.4 windows -> 3 gallons, not 2 + 1 rounded separately
    assert trim["gallons"] == 3
    assert trim["doors_count"] == 9
    assert trim["windows_count"] == 1
    assert trim["cost"] == 3 * 40

    doors_only = QuoteCalculator(neutral_config).calculate({
        "measurements": {"doors": 9}, "options": NEUTRAL_OPTIONS,
    })
    assert doors_only["materials"]["trim_paint"]["gallons"] == 2


# --- Totals ---

def test_default_percentages():
    totals = QuoteCalculator().apply_totals(1000)
    assert totals["overhead"] == 100
    assert totals["markup"] == 200
    assert totals["tax"] == 0
    assert totals["total"] == 1300


def test_zero_surfaces_total_is_minimum():
    quote = QuoteCalculator().calculate({"minimum_job_price": 500, "options": NEUTRAL_OPTIONS})
    assert quote["materials"]["total"] == 0
    assert quote["labor"]["total"] == 0
    assert quote["subtotal"] == 0
    assert quote["total"] == 500
    assert quote["timeline"] == "1 day"


def test_minimum_floor_applies_after_tax(neutral_config):
    request = {
        "measurements": {"wall_sqft": 100},
        "pricing_rates": {"walls_per_sqft": 1.0},
        "overhead_percent": 0,
        "markup_percent": 0,
        "tax_rate": 10,
        "minimum_job_price": 200,
        "options": NEUTRAL_OPTIONS,
    }
    quote = QuoteCalculator(neutral_config).calculate(request)
    # 100 sqft labor + 1 gal @ $35 = 135, + 10% tax = 148.50 -> floored to 200
    assert quote["tax"] == pytest.approx(13.5)
    assert quote["total"] == 200
    assert quote["total"] >= request["minimum_job_price"]


# --- Rates ---

def test_missing_rates_use_fallbacks(neutral_config):
    request = {
        "measurements": {"wall_sqft": 1000, "ceiling_sqft": 400, "doors": 2, "windows": 3},
        "options": NEUTRAL_OPTIONS,
    }
    labor = QuoteCalculator(neutral_config).calculate(request)["labor"]
    assert labor["walls"]["rate"] == 1.50
    assert labor["ceilings"]["rate"] == 1.25
    assert labor["doors"]["rate"] == 150
    assert labor["windows"]["rate"] == 100


def test_zero_rate_is_not_replaced_by_fallback(neutral_config):
    request = _wall_request(pricing_rates={"walls_per_sqft": 0})
    quote = QuoteCalculator(neutral_config).calculate(request)
    assert quote["labor"]["walls"]["cost"] == 0


def test_rates_adjusted_by_options():
    config = create_default_config(1)
    options = {"season": "winter", "location_type": "urban", "is_rush_job": True}
    quote = QuoteCalculator(config).calculate(_wall_request(options=options))
    expected_rate = 1.50 * 0.95 * 1.2 * 1.25
    assert quote["labor"]["walls"]["rate"] == pytest.approx(expected_rate)
    assert quote["labor"]["adjustments"]["total"] == pytest.approx(0.95 * 1.2 * 1.25)
    # Materials are not multiplied
    assert quote["materials"]["wall_paint"]["cost"] == 1200


def test_neutral_buckets_leave_rates_unchanged(neutral_config):
    quote = QuoteCalculator(neutral_config).calculate(_wall_request())
    assert quote["labor"]["walls"]["rate"] == 1.50


# --- Surfaces + grades ---

def test_surface_flags_gate_pricing(neutral_config):
    request = {
        "measurements": {"wall_sqft": 800, "ceiling_sqft": 300, "doors": 4},
        "surfaces": {"walls": True, "ceilings": False, "doors": False},
        "options": NEUTRAL_OPTIONS,
    }
    quote = QuoteCalculator(neutral_config).calculate(request)
    assert "wall_paint" in quote["materials"]
    assert "ceiling_paint" not in quote["materials"]
    assert "trim_paint" not in quote["materials"]
    assert "doors" not in quote["labor"]


def test_no_surface_flags_prices_everything_measured(neutral_config):
    request = {
        "measurements": {"wall_sqft": 800, "ceiling_sqft": 300, "doors": 4},
        "options": NEUTRAL_OPTIONS,
    }
    quote = QuoteCalculator(neutral_config).calculate(request)
    assert quote["materials"]["ceiling_paint"]["gallons"] == 2     # ceil(300/350*1.8)
    assert quote["materials"]["trim_paint"]["gallons"] == 1        # ceil(4/4.5)
    assert "windows" not in quote["labor"]


def test_product_grade_selects_catalog_product(neutral_config):
    request = {
        "measurements": {"wall_sqft": 1000, "ceiling_sqft": 500},
        "paint_products": {"ceiling": {"cost_per_gallon": 33}},
        "options": {**NEUTRAL_OPTIONS, "product_grade": "premium"},
    }
    materials = QuoteCalculator(neutral_config).calculate(request)["materials"]
    assert materials["wall_paint"]["product"] == "Premium Paint"
    assert materials["wall_paint"]["gallons"] == 5      # ceil(1000/400*1.8)
    assert materials["wall_paint"]["cost"] == 5 * 50
    # Caller-supplied cost beats the catalog, catalog name and spread still apply
    assert materials["ceiling_paint"]["product"] == "Premium Ceiling"
    assert materials["ceiling_paint"]["cost"] == materials["ceiling_paint"]["gallons"] * 33


# --- Input ---

@pytest.mark.parametrize("request_data", [
    {"measurements": {"wall_sqft": -10}},
    {"measurements": {"doors": -1}},
    {"tax_rate": -5},
    {"pricing_rates": {"walls_per_sqft": -1.5}},
    {"paint_products": {"walls": {"spread_rate": 0}}},
])
def test_invalid_input_rejected(request_data):
    with pytest.raises(QuoteInputError):
        QuoteCalculator().calculate(request_data)


def test_accepts_model_or_dict(neutral_config):
    calc = QuoteCalculator(neutral_config)
    data = _wall_request()
    assert calc.calculate(QuoteRequest.model_validate(data)) == calc.calculate(data)


@pytest.mark.parametrize("smaller,larger", [(100, 200), (1000, 1001), (4500, 9000)])
def test_more_wall_area_never_costs_less(neutral_config, smaller, larger):
    calc = QuoteCalculator(neutral_config)
    small = calc.calculate({"measurements": {"wall_sqft": smaller}, "options": NEUTRAL_OPTIONS})
    large = calc.calculate({"measurements": {"wall_sqft": larger}, "options": NEUTRAL_OPTIONS})
    assert large["materials"]["total"] >= small["materials"]["total"]
    assert large["labor"]["total"] >= small["labor"]["total"]


# --- Timeline ---

@pytest.mark.parametrize("hours,days,label", [
    (0, 0, "1 day"),
    (6, 1, "1 day"),
    (9, 2, "2 days"),
    (24, 3, "3 days"),
    (30, 4, "1 week"),
    (40, 5, "1 week"),
    (41, 6, "2 weeks"),
    (120, 15, "3 weeks"),
])
def test_timeline_labels(hours, days, label):
    assert estimate_timeline(hours) == (days, label)


def test_quote_timeline_from_productivity(neutral_config):
    # 4500 sqft / 150 sqft per hour = 30 hours -> 4 days
    quote = QuoteCalculator(neutral_config).calculate(_wall_request())
    assert quote["labor"]["total_hours"] == 30
    assert quote["timeline_days"] == 4
    assert quote["timeline"] == "1 week"


def test_season_pinned_by_date():
    calc = QuoteCalculator(create_default_config(1))
    request = _wall_request(options={})
    winter = calc.calculate(request, today=date(2024, 1, 15))
    summer = calc.calculate(request, today=date(2024, 7, 15))
    assert winter["labor"]["walls"]["rate"] == pytest.approx(1.50 * 0.95)
    assert summer["labor"]["walls"]["rate"] == pytest.approx(1.50 * 1.15)
