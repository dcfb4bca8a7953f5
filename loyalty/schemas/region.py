"""Region config and monthly prize request schemas"""

from typing import Optional

from pydantic import Field

from ..models import Region, RegionCategory
from .base import RequestSchema


class RegionConfigCreateSchema(RequestSchema):
    region: Region
    category: RegionCategory
    subcategory: Optional[str] = Field(None, max_length=100)
    name: str = Field(..., min_length=1, max_length=255)
    new_customer_goal_rate: int = Field(1000, ge=1)
    renewal_goal_rate: int = Field(2000, ge=1)
    monthly_goal_target: Optional[int] = Field(None, ge=0)
    is_active: bool = True


class RegionConfigUpdateSchema(RequestSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    new_customer_goal_rate: Optional[int] = Field(None, ge=1)
    renewal_goal_rate: Optional[int] = Field(None, ge=1)
    monthly_goal_target: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None


class MonthlyPrizeCreateSchema(RequestSchema):
    region_config_id: int
    month: int = Field(..., ge=1, le=12)
    year: int = Field(..., ge=2000, le=2100)
    prize_name: str = Field(..., min_length=1, max_length=255)
    prize_description: Optional[str] = None
    goal_target: int = Field(0, ge=0)


class MonthlyPrizeUpdateSchema(RequestSchema):
    month: Optional[int] = Field(None, ge=1, le=12)
    year: Optional[int] = Field(None, ge=2000, le=2100)
    prize_name: Optional[str] = Field(None, min_length=1, max_length=255)
    prize_description: Optional[str] = None
    goal_target: Optional[int] = Field(None, ge=0)
    is_active: Optional[bool] = None
