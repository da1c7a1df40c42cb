from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship
from datetime import datetime
from .database import Base


class Company(Base):
    """Painting contractor account: rates, paint defaults and percentages."""
    __tablename__ = "companies"

    id = Column(Integer, primary_key=True, index=True)
    company_name = Column(String, nullable=False)
    email = Column(String, nullable=True)
    tax_rate = Column(Float, nullable=True)                     # percent
    default_hourly_rate = Column(Float, nullable=True)
    default_labor_percentage = Column(Float, nullable=True)
    default_walls_paint_cost = Column(Float, nullable=True)     # $/gal
    default_ceilings_paint_cost = Column(Float, nullable=True)
    default_trim_paint_cost = Column(Float, nullable=True)
    default_paint_coverage = Column(Float, nullable=True)       # sqft/gal
    default_sundries_percentage = Column(Float, nullable=True)
    markup_percentage = Column(Float, nullable=True)
    overhead_percent = Column(Float, nullable=True)
    minimum_job_size = Column(Float, nullable=True)             # $
    created_at = Column(DateTime, default=datetime.utcnow)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    paint_products = relationship("PaintProduct", back_populates="company", cascade="all, delete-orphan")
    pricing_config = relationship("PricingConfigRecord", back_populates="company", uselist=False,
                                  cascade="all, delete-orphan")


class PaintProduct(Base):
    """A paint the company stocks. use_case picks the surface it prices."""
    __tablename__ = "company_paint_products"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    product_name = Column(String, nullable=False)
    use_case = Column(String, nullable=False)   # 'walls' | 'ceilings' | 'trim' | 'primer' | ...
    cost_per_gallon = Column(Float, nullable=False)
    coverage_rate = Column(Float, nullable=True)
    supplier = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow)

    company = relationship("Company", back_populates="paint_products")


class PricingConfigRecord(Base):
    """Stored PricingConfig JSON, one row per company."""
    __tablename__ = "pricing_configs"

    id = Column(Integer, primary_key=True, index=True)
    company_id = Column(Integer, ForeignKey("companies.id"), unique=True, nullable=False)
    config_json = Column(JSON, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    company = relationship("Company", back_populates="pricing_config")
