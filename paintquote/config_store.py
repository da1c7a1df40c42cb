"""
Per-company persistence for PricingConfig.

The config is stored as camelCase JSON in pricing_configs.config_json, the same
shape the multiplier tables accept on input, so a saved config reloads as-is.
"""

import logging
from datetime import datetime
from typing import Optional

from sqlalchemy.orm import Session

from . import models
from .pricing.pricing_config import PricingConfig

logger = logging.getLogger(__name__)


class PricingConfigStore:
    """load() / save() a company's PricingConfig. Missing row -> None."""

    def __init__(self, db: Session):
        self.db = db

    def load(self, company_id: int) -> Optional[PricingConfig]:
        record = self.db.query(models.PricingConfigRecord).filter(
            models.PricingConfigRecord.company_id == company_id
        ).first()
        if not record:
            return None
        data = dict(record.config_json)
        data["companyId"] = company_id
        return PricingConfig.model_validate(data)

    def save(self, config: PricingConfig) -> PricingConfig:
        config = config.model_copy(update={"last_updated": datetime.utcnow()})
        payload = config.model_dump(mode="json", by_alias=True)

        record = self.db.query(models.PricingConfigRecord).filter(
            models.PricingConfigRecord.company_id == config.company_id
        ).first()
        if record:
            record.config_json = payload
        else:
            record = models.PricingConfigRecord(company_id=config.company_id, config_json=payload)
            self.db.add(record)
        self.db.commit()
        logger.info("Saved pricing config for company %s", config.company_id)
        return config
