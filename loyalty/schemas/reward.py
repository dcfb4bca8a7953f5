"""Reward and redemption request schemas"""

from typing import Optional

from pydantic import Field

from ..models import Region, ShipmentStatus
from .base import RequestSchema


class RewardCreateSchema(RequestSchema):
    name: str = Field(..., min_length=1, max_length=255)
    description: Optional[str] = None
    points_cost: int = Field(..., ge=1)
    category: str = Field(..., min_length=1, max_length=100)
    region: Optional[Region] = None
    is_active: bool = True
    stock_quantity: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)


class RewardUpdateSchema(RequestSchema):
    name: Optional[str] = Field(None, min_length=1, max_length=255)
    description: Optional[str] = None
    points_cost: Optional[int] = Field(None, ge=1)
    category: Optional[str] = Field(None, min_length=1, max_length=100)
    region: Optional[Region] = None
    is_active: Optional[bool] = None
    stock_quantity: Optional[int] = Field(None, ge=0)
    image_url: Optional[str] = Field(None, max_length=500)


class RedeemSchema(RequestSchema):
    delivery_address: Optional[str] = None


class RejectSchema(RequestSchema):
    reason: Optional[str] = None


class ShipmentUpdateSchema(RequestSchema):
    shipment_status: ShipmentStatus
