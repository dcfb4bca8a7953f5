"""Deal request schemas"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import Field

from ..models import DealStatus, DealType, ProductType
from .base import RequestSchema


class DealCreateSchema(RequestSchema):
    """Status, points and approver fields are server-controlled and ignored here"""

    product_type: ProductType
    product_name: str = Field(..., min_length=1, max_length=255)
    deal_value: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    deal_type: DealType = DealType.NEW_CUSTOMER
    quantity: int = Field(1, ge=1)
    close_date: datetime
    client_info: Optional[str] = None
    license_agreement_number: Optional[str] = Field(None, max_length=100)


class DealUpdateSchema(RequestSchema):
    product_type: Optional[ProductType] = None
    product_name: Optional[str] = Field(None, min_length=1, max_length=255)
    deal_value: Optional[Decimal] = Field(None, gt=0, max_digits=12, decimal_places=2)
    deal_type: Optional[DealType] = None
    quantity: Optional[int] = Field(None, ge=1)
    close_date: Optional[datetime] = None
    client_info: Optional[str] = None
    license_agreement_number: Optional[str] = Field(None, max_length=100)
    status: Optional[DealStatus] = None
