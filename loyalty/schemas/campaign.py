"""Campaign request schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field, model_validator

from .base import RequestSchema


class CampaignCreateSchema(RequestSchema):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    multiplier: Decimal = Field(Decimal('1.00'), gt=0, le=Decimal('9.99'), decimal_places=2)
    start_date: datetime
    end_date: datetime
    is_active: bool = True

    @model_validator(mode='after')
    def check_dates(self):
        if self.end_date < self.start_date:
            raise ValueError('Campaign end date must be on or after the start date')
        return self


class CampaignUpdateSchema(RequestSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    multiplier: Optional[Decimal] = Field(None, gt=0, le=Decimal('9.99'), decimal_places=2)
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None
    is_active: Optional[bool] = None
