"""Points configuration request schema"""

from datetime import date
from typing import Optional

from pydantic import Field, model_validator

from ..models import Region
from .base import RequestSchema

MAX_RATE = 1_000_000
MAX_THRESHOLD = 10_000_000


class PointsConfigUpdateSchema(RequestSchema):
    region: Optional[Region] = None
    software_rate: Optional[int] = Field(None, ge=1, le=MAX_RATE)
    hardware_rate: Optional[int] = Field(None, ge=1, le=MAX_RATE)
    equipment_rate: Optional[int] = Field(None, ge=1, le=MAX_RATE)
    grand_prize_threshold: Optional[int] = Field(None, ge=1, le=MAX_THRESHOLD)
    default_new_customer_goal_rate: Optional[int] = Field(None, ge=1, le=MAX_RATE)
    default_renewal_goal_rate: Optional[int] = Field(None, ge=1, le=MAX_RATE)
    redemption_start_date: Optional[date] = None
    redemption_end_date: Optional[date] = None

    @model_validator(mode='after')
    def check_redemption_window(self):
        start, end = self.redemption_start_date, self.redemption_end_date
        if start and end and end < start:
            raise ValueError('Redemption end date must be on or after the start date')
        return self
