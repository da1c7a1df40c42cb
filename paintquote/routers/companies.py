import logging
from dataclasses import asdict
from typing import List

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from .. import models, schemas
from ..database import get_db
from ..pricing.quote_calculator import QuoteInputError
from ..settings_integration import (
    CompanyNotFoundError, SettingsCache, SettingsIntegrationService,
    get_settings_cache, get_settings_service,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["companies"])


def _get_company(db: Session, company_id: int) -> models.Company:
    company = db.query(models.Company).filter(models.Company.id == company_id).first()
    if not company:
        raise HTTPException(status_code=404, detail="Company not found")
    return company


# --- Company settings ---

@router.post("/", response_model=schemas.Company)
def create_company(company: schemas.CompanyCreate, db: Session = Depends(get_db)):
    db_company = models.Company(**company.model_dump())
    db.add(db_company)
    db.commit()
    db.refresh(db_company)
    logger.info("Created company %s (%s)", db_company.id, db_company.company_name)
    return db_company


@router.get("/", response_model=List[schemas.Company])
def list_companies(skip: int = 0, limit: int = 100, db: Session = Depends(get_db)):
    return db.query(models.Company).order_by(models.Company.company_name).offset(skip).limit(limit).all()


@router.get("/{company_id}", response_model=schemas.Company)
def get_company(company_id: int, db: Session = Depends(get_db)):
    return _get_company(db, company_id)


@router.patch("/{company_id}", response_model=schemas.Company)
def update_company(company_id: int, update: schemas.CompanyUpdate, db: Session = Depends(get_db),
                   cache: SettingsCache = Depends(get_settings_cache)):
    company = _get_company(db, company_id)
    for field, value in update.model_dump(exclude_unset=True).items():
        setattr(company, field, value)
    db.commit()
    db.refresh(company)
    cache.invalidate(company_id)
    return company


# --- Paint products ---

@router.post("/{company_id}/paint-products", response_model=schemas.PaintProduct)
def add_paint_product(company_id: int, product: schemas.PaintProductCreate, db: Session = Depends(get_db),
                      cache: SettingsCache = Depends(get_settings_cache)):
    _get_company(db, company_id)
    db_product = models.PaintProduct(company_id=company_id, **product.model_dump())
    db.add(db_product)
    db.commit()
    db.refresh(db_product)
    cache.invalidate(company_id)
    return db_product


@router.get("/{company_id}/paint-products", response_model=List[schemas.PaintProduct])
def list_paint_products(company_id: int, db: Session = Depends(get_db)):
    _get_company(db, company_id)
    return db.query(models.PaintProduct).filter(
        models.PaintProduct.company_id == company_id
    ).order_by(models.PaintProduct.id).all()


@router.delete("/{company_id}/paint-products/{product_id}")
def delete_paint_product(company_id: int, product_id: int, db: Session = Depends(get_db),
                         cache: SettingsCache = Depends(get_settings_cache)):
    product = db.query(models.PaintProduct).filter(
        models.PaintProduct.id == product_id,
        models.PaintProduct.company_id == company_id,
    ).first()
    if not product:
        raise HTTPException(status_code=404, detail="Paint product not found")
    db.delete(product)
    db.commit()
    cache.invalidate(company_id)
    return {"ok": True}


# --- Pricing with company settings ---

@router.get("/{company_id}/calculator-settings")
def get_calculator_settings(company_id: int,
                            service: SettingsIntegrationService = Depends(get_settings_service)):
    try:
        return asdict(service.get_quote_calculator_settings(company_id))
    except CompanyNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{company_id}/quotes/calculate")
def calculate_company_quote(company_id: int, request: schemas.QuoteRequest,
                            service: SettingsIntegrationService = Depends(get_settings_service)):
    try:
        return service.calculate_quote(company_id, request)
    except CompanyNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except QuoteInputError as e:
        raise HTTPException(status_code=422, detail=str(e))


@router.post("/{company_id}/estimate")
def estimate(company_id: int, request: schemas.EstimateRequest,
             service: SettingsIntegrationService = Depends(get_settings_service)):
    try:
        return service.estimate(company_id, request)
    except CompanyNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{company_id}/quick-estimate")
def quick_estimate(company_id: int, request: schemas.QuickEstimateRequest,
                   service: SettingsIntegrationService = Depends(get_settings_service)):
    try:
        return service.quick_estimate(company_id, request)
    except CompanyNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.post("/{company_id}/adjusted-rate")
def adjusted_rate(company_id: int, request: schemas.AdjustedRateRequest,
                  service: SettingsIntegrationService = Depends(get_settings_service)):
    try:
        company_settings = service.get_company_settings(company_id)
    except CompanyNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    rate = service.apply_pricing_multipliers(
        request.base_rate, company_settings, request.options.to_pricing_options(),
    )
    return {"base_rate": request.base_rate, "adjusted_rate": rate}
