"""
HTTP surface tests: stateless quotes, company settings, pricing config,
company-priced quotes and estimates.

Tests:
1-4.   /health, /api/quotes/calculate, /api/quotes/format, input rejection
5-8.   Company + paint product CRUD
9-12.  Pricing config get / save / validation
13-17. Calculator settings, company quote, estimate, quick estimate, adjusted rate
18-19. Cache invalidated by writes, unknown company
"""

from paintquote.pricing.pricing_config import create_default_config


NEUTRAL_SEASONS = {"spring": 1.0, "summer": 1.0, "fall": 1.0, "winter": 1.0}


def _neutral_config_payload():
    payload = create_default_config(0).model_dump(mode="json", by_alias=True)
    payload["seasonalPricing"] = dict(NEUTRAL_SEASONS)
    return payload


def _wall_quote():
    return {
        "measurements": {"linear_feet_walls": 500, "ceiling_height": 9},
        "paint_products": {"walls": {"name": "ProMar 200", "spread_rate": 350, "cost_per_gallon": 50}},
        "pricing_rates": {"walls_per_sqft": 1.50},
        "surfaces": {"walls": True},
        "options": {"season": "winter"},
    }


# --- Stateless ---

def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["status"] == "ok"


def test_calculate_quote(client):
    response = client.post("/api/quotes/calculate", json=_wall_quote())
    assert response.status_code == 200
    data = response.json()
    assert data["materials"]["wall_paint"]["gallons"] == 24
    assert data["materials"]["wall_paint"]["cost"] == 1200
    # Default config: winter 0.95
    assert abs(data["labor"]["walls"]["rate"] - 1.50 * 0.95) < 1e-9
    assert data["total"] >= data["subtotal"]


def test_format_quote(client):
    response = client.post("/api/quotes/format?hide_internal_details=false", json=_wall_quote())
    assert response.status_code == 200
    data = response.json()
    assert data["text"].startswith("=== PAINTING QUOTE ===")
    assert "=== INTERNAL REVIEW ===" in data["text"]
    assert data["quote"]["materials"]["wall_paint"]["product"] == "ProMar 200"


def test_negative_measurement_rejected(client):
    response = client.post("/api/quotes/calculate", json={"measurements": {"wall_sqft": -100}})
    assert response.status_code == 422


# --- Companies ---

def test_create_and_get_company(client, company):
    assert company["id"] > 0
    assert company["company_name"] == "Brush & Roller Painting"

    response = client.get(f"/api/companies/{company['id']}")
    assert response.status_code == 200
    assert response.json()["tax_rate"] == 8.0

    listed = client.get("/api/companies/").json()
    assert [c["id"] for c in listed] == [company["id"]]


def test_update_company(client, company):
    response = client.patch(f"/api/companies/{company['id']}", json={"default_hourly_rate": 72.5})
    assert response.status_code == 200
    data = response.json()
    assert data["default_hourly_rate"] == 72.5
    assert data["company_name"] == "Brush & Roller Painting"


def test_paint_products(client, company):
    url = f"/api/companies/{company['id']}/paint-products"
    response = client.post(url, json={
        "product_name": "Duration Home",
        "use_case": "walls",
        "cost_per_gallon": 68,
        "coverage_rate": 375,
        "supplier": "Sherwin-Williams",
    })
    assert response.status_code == 200
    product = response.json()
    assert product["company_id"] == company["id"]

    products = client.get(url).json()
    assert [p["product_name"] for p in products] == ["Duration Home"]

    response = client.delete(f"{url}/{product['id']}")
    assert response.status_code == 200
    assert client.get(url).json() == []


def test_paint_product_validation(client, company):
    response = client.post(f"/api/companies/{company['id']}/paint-products", json={
        "product_name": "Bad", "use_case": "walls", "cost_per_gallon": -1,
    })
    assert response.status_code == 422


# --- Pricing config ---

def test_pricing_config_defaults(client, company):
    response = client.get(f"/api/companies/{company['id']}/pricing-config")
    assert response.status_code == 200
    config = response.json()["config"]
    assert config["companyId"] == company["id"]
    assert config["complexityMultipliers"]["highDetail"] == 1.4
    assert config["minimumJobPrice"] == 500


def test_save_pricing_config(client, company):
    url = f"/api/companies/{company['id']}/pricing-config"
    payload = _neutral_config_payload()
    payload["rushJobMultiplier"] = 1.5
    response = client.post(url, json=payload)
    assert response.status_code == 200
    assert response.json()["success"] is True

    config = client.get(url).json()["config"]
    assert config["rushJobMultiplier"] == 1.5
    assert config["seasonalPricing"] == NEUTRAL_SEASONS
    assert config["companyId"] == company["id"]


def test_put_pricing_config(client, company):
    url = f"/api/companies/{company['id']}/pricing-config"
    payload = _neutral_config_payload()
    payload["minimumJobPrice"] = 250
    assert client.put(url, json=payload).status_code == 200
    assert client.get(url).json()["config"]["minimumJobPrice"] == 250


def test_invalid_pricing_config_rejected(client, company):
    url = f"/api/companies/{company['id']}/pricing-config"
    payload = _neutral_config_payload()
    payload["prepWorkMultipliers"]["heavy"] = -1
    assert client.post(url, json=payload).status_code == 422

    payload = _neutral_config_payload()
    del payload["heightMultipliers"]["cathedral"]
    assert client.post(url, json=payload).status_code == 422


# --- Company pricing ---

def test_calculator_settings(client, company):
    response = client.get(f"/api/companies/{company['id']}/calculator-settings")
    assert response.status_code == 200
    data = response.json()
    assert data["base_hourly_rate"] == 60.0
    assert data["tax_rate"] == 8.0
    assert data["markup_percentage"] == 25.0
    assert data["minimum_job_price"] == 400.0
    assert abs(data["primer_coverage"] - 280) < 1e-9


def test_company_quote(client, company):
    client.post(f"/api/companies/{company['id']}/pricing-config", json=_neutral_config_payload())
    response = client.post(f"/api/companies/{company['id']}/quotes/calculate", json=_wall_quote())
    assert response.status_code == 200
    data = response.json()
    assert abs(data["subtotal"] - 7950) < 1e-6
    # Company overhead 10%, markup 25%, tax 8%
    assert abs(data["overhead"] - 795) < 1e-6
    assert abs(data["markup"] - 1987.5) < 1e-6
    assert abs(data["tax"] - (7950 + 795 + 1987.5) * 0.08) < 1e-6


def test_company_estimate(client, company):
    client.post(f"/api/companies/{company['id']}/pricing-config", json=_neutral_config_payload())
    response = client.post(f"/api/companies/{company['id']}/estimate", json={
        "surfaces": {"walls": 1500, "doors": 2},
        "project_details": {"prep_condition": "good"},
    })
    assert response.status_code == 200
    data = response.json()
    assert data["labor"]["rate"] == 60.0
    assert abs(data["labor"]["base_hours"] - 14) < 1e-9
    assert data["used_settings"]["company_name"] == "Brush & Roller Painting"
    assert data["total"] >= 400


def test_quick_estimate(client, company):
    response = client.post(f"/api/companies/{company['id']}/quick-estimate", json={"wall_sqft": 2000})
    assert response.status_code == 200
    data = response.json()
    assert data["low"] <= data["recommended"] <= data["high"]


def test_adjusted_rate(client, company):
    client.post(f"/api/companies/{company['id']}/pricing-config", json=_neutral_config_payload())
    response = client.post(f"/api/companies/{company['id']}/adjusted-rate", json={
        "base_rate": 100,
        "options": {"location_type": "urban", "is_rush_job": True},
    })
    assert response.status_code == 200
    assert abs(response.json()["adjusted_rate"] - 150) < 1e-9


# --- Cache + errors ---

def test_company_update_invalidates_cached_settings(client, company):
    url = f"/api/companies/{company['id']}/calculator-settings"
    assert client.get(url).json()["base_hourly_rate"] == 60.0
    client.patch(f"/api/companies/{company['id']}", json={"default_hourly_rate": 90})
    assert client.get(url).json()["base_hourly_rate"] == 90

    client.post(f"/api/companies/{company['id']}/paint-products", json={
        "product_name": "Emerald", "use_case": "walls", "cost_per_gallon": 85,
    })
    assert client.get(url).json()["walls_paint_cost"] == 85


def test_unknown_company_is_404(client):
    assert client.get("/api/companies/999").status_code == 404
    assert client.get("/api/companies/999/calculator-settings").status_code == 404
    assert client.post("/api/companies/999/estimate", json={}).status_code == 404
    assert client.get("/api/companies/999/pricing-config").status_code == 404
