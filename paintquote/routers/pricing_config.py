import logging

from fastapi import APIRouter, Body, Depends, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from .. import models
from ..config_store import PricingConfigStore
from ..database import get_db
from ..pricing.pricing_config import PricingConfig, create_default_config
from ..settings_integration import SettingsCache, get_settings_cache

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/companies", tags=["pricing-config"])


def _require_company(db: Session, company_id: int):
    if not db.query(models.Company).filter(models.Company.id == company_id).first():
        raise HTTPException(status_code=404, detail="Company not found")


@router.get("/{company_id}/pricing-config")
def get_pricing_config(company_id: int, db: Session = Depends(get_db)):
    """Stored config, or the defaults when the company has not saved one."""
    _require_company(db, company_id)
    config = PricingConfigStore(db).load(company_id) or create_default_config(company_id)
    return {"config": config.model_dump(mode="json", by_alias=True)}


@router.post("/{company_id}/pricing-config")
def save_pricing_config(company_id: int, payload: dict = Body(...), db: Session = Depends(get_db),
                        cache: SettingsCache = Depends(get_settings_cache)):
    _require_company(db, company_id)
    payload = {k: v for k, v in payload.items() if k not in ("companyId", "company_id")}
    try:
        config = PricingConfig.model_validate({**payload, "company_id": company_id})
    except ValidationError as e:
        raise HTTPException(status_code=422, detail=str(e))

    saved = PricingConfigStore(db).save(config)
    cache.invalidate(company_id)
    return {
        "success": True,
        "message": "Pricing configuration saved successfully",
        "config": saved.model_dump(mode="json", by_alias=True),
    }


@router.put("/{company_id}/pricing-config")
def replace_pricing_config(company_id: int, payload: dict = Body(...), db: Session = Depends(get_db),
                           cache: SettingsCache = Depends(get_settings_cache)):
    return save_pricing_config(company_id, payload, db, cache)
