from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime

from .pricing.rate_resolver import PricingOptions


# --- Company settings ---

class CompanyBase(BaseModel):
    company_name: str
    email: Optional[str] = None
    tax_rate: Optional[float] = Field(None, ge=0)
    default_hourly_rate: Optional[float] = Field(None, ge=0)
    default_labor_percentage: Optional[float] = Field(None, ge=0)
    default_walls_paint_cost: Optional[float] = Field(None, ge=0)
    default_ceilings_paint_cost: Optional[float] = Field(None, ge=0)
    default_trim_paint_cost: Optional[float] = Field(None, ge=0)
    default_paint_coverage: Optional[float] = Field(None, gt=0)
    default_sundries_percentage: Optional[float] = Field(None, ge=0)
    markup_percentage: Optional[float] = Field(None, ge=0)
    overhead_percent: Optional[float] = Field(None, ge=0)
    minimum_job_size: Optional[float] = Field(None, ge=0)

class CompanyCreate(CompanyBase):
    pass

class CompanyUpdate(CompanyBase):
    company_name: Optional[str] = None

class Company(CompanyBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    class Config:
        from_attributes = True

class PaintProductBase(BaseModel):
    product_name: str
    use_case: str                      # 'walls' | 'ceilings' | 'trim' | 'primer' | ...
    cost_per_gallon: float = Field(ge=0)
    coverage_rate: Optional[float] = Field(None, gt=0)
    supplier: Optional[str] = None

class PaintProductCreate(PaintProductBase):
    pass

class PaintProduct(PaintProductBase):
    id: int
    company_id: int
    class Config:
        from_attributes = True


# --- Quote calculator input ---
# Negative measurements are rejected here; zero means "no surface".

class Measurements(BaseModel):
    linear_feet_walls: Optional[float] = Field(None, ge=0)
    ceiling_height: Optional[float] = Field(None, ge=0)   # feet
    wall_sqft: Optional[float] = Field(None, ge=0)
    ceiling_sqft: Optional[float] = Field(None, ge=0)
    trim_linear_ft: Optional[float] = Field(None, ge=0)
    doors: Optional[float] = Field(None, ge=0)
    windows: Optional[float] = Field(None, ge=0)
    priming_sqft: Optional[float] = Field(None, ge=0)

class PaintProductSpec(BaseModel):
    name: Optional[str] = None
    spread_rate: Optional[float] = Field(None, gt=0)      # sqft per gallon
    cost_per_gallon: Optional[float] = Field(None, ge=0)

class TrimProductSpec(BaseModel):
    name: Optional[str] = None
    doors_per_gallon: Optional[float] = Field(None, gt=0)
    windows_per_gallon: Optional[float] = Field(None, gt=0)
    cost_per_gallon: Optional[float] = Field(None, ge=0)

class PaintProductSpecs(BaseModel):
    primer: Optional[PaintProductSpec] = None
    walls: Optional[PaintProductSpec] = None
    ceiling: Optional[PaintProductSpec] = None
    trim: Optional[TrimProductSpec] = None

class PricingRates(BaseModel):
    walls_per_sqft: Optional[float] = Field(None, ge=0)
    ceilings_per_sqft: Optional[float] = Field(None, ge=0)
    doors_per_unit: Optional[float] = Field(None, ge=0)
    windows_per_unit: Optional[float] = Field(None, ge=0)
    primer_per_sqft: Optional[float] = Field(None, ge=0)

class SurfaceSelection(BaseModel):
    walls: bool = False
    ceilings: bool = False
    doors: bool = False
    windows: bool = False
    trim: bool = False

class QuoteOptions(BaseModel):
    # Strings rather than enums: unknown values price at a neutral 1.0
    product_grade: Optional[str] = None
    location_type: Optional[str] = None
    custom_location: Optional[str] = None
    season: Optional[str] = None
    is_rush_job: bool = False
    prep_work: Optional[str] = None
    complexity: Optional[str] = None
    ceiling_height: Optional[str] = None

    def to_pricing_options(self) -> PricingOptions:
        return PricingOptions(**self.model_dump())


class QuoteRequest(BaseModel):
    measurements: Measurements = Field(default_factory=Measurements)
    paint_products: Optional[PaintProductSpecs] = None
    needs_primer: bool = False
    pricing_rates: PricingRates = Field(default_factory=PricingRates)
    surfaces: Optional[SurfaceSelection] = None   # None = price every measured surface
    options: QuoteOptions = Field(default_factory=QuoteOptions)
    overhead_percent: Optional[float] = Field(None, ge=0)
    markup_percent: Optional[float] = Field(None, ge=0)
    tax_rate: Optional[float] = Field(None, ge=0)
    minimum_job_price: Optional[float] = Field(None, ge=0)


# --- Productivity-based estimate input ---

class EstimateSurfaces(BaseModel):
    walls: Optional[float] = Field(None, ge=0)      # sqft
    ceilings: Optional[float] = Field(None, ge=0)   # sqft
    trim: Optional[float] = Field(None, ge=0)       # linear ft
    doors: Optional[float] = Field(None, ge=0)
    windows: Optional[float] = Field(None, ge=0)
    priming: Optional[float] = Field(None, ge=0)    # sqft needing primer

class ProductOverride(BaseModel):
    name: Optional[str] = None
    coverage_rate: Optional[float] = Field(None, gt=0)
    cost_per_gallon: Optional[float] = Field(None, ge=0)

class EstimateProducts(BaseModel):
    walls: Optional[ProductOverride] = None
    ceiling: Optional[ProductOverride] = None
    trim: Optional[ProductOverride] = None
    primer: Optional[ProductOverride] = None

class ProjectDetails(BaseModel):
    paint_quality: str = "standard"
    prep_condition: Optional[str] = None   # 'good' | 'minor' | 'major'
    rush_job: bool = False
    location_type: str = "suburban"
    custom_location: Optional[str] = None
    complexity: str = "standard"
    ceiling_height: str = "standard"
    season: Optional[str] = None

class EstimateOverrides(BaseModel):
    labor_rate: Optional[float] = Field(None, gt=0)
    tax_rate: Optional[float] = Field(None, ge=0)
    markup_percentage: Optional[float] = Field(None, ge=0)

class EstimateRequest(BaseModel):
    surfaces: EstimateSurfaces = Field(default_factory=EstimateSurfaces)
    paint_products: Optional[EstimateProducts] = None
    project_details: ProjectDetails = Field(default_factory=ProjectDetails)
    overrides: Optional[EstimateOverrides] = None

class QuickEstimateRequest(BaseModel):
    wall_sqft: float = Field(ge=0)
    ceiling_sqft: float = Field(0.0, ge=0)
    paint_quality: str = "standard"

class AdjustedRateRequest(BaseModel):
    base_rate: float = Field(gt=0)
    options: QuoteOptions = Field(default_factory=QuoteOptions)
