"""Admin user management request schemas"""

from typing import List, Optional

from pydantic import EmailStr, Field

from ..models import Region, RegionCategory, UserRole
from .auth import RegisterSchema
from .base import RequestSchema


class InviteSchema(RequestSchema):
    email: EmailStr
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    country: str = Field(..., min_length=1, max_length=100)
    region: Optional[Region] = None


class BulkInviteSchema(RequestSchema):
    users: List[dict] = Field(..., min_length=1)


class AdminUserCreateSchema(RegisterSchema):
    role: UserRole = UserRole.USER
    region_category: Optional[RegionCategory] = None
    region_subcategory: Optional[str] = Field(None, max_length=100)


class AdminUserUpdateSchema(RequestSchema):
    email: Optional[EmailStr] = None
    first_name: Optional[str] = Field(None, min_length=1, max_length=100)
    last_name: Optional[str] = Field(None, min_length=1, max_length=100)
    country: Optional[str] = Field(None, min_length=1, max_length=100)
    region: Optional[Region] = None
    region_category: Optional[RegionCategory] = None
    region_subcategory: Optional[str] = Field(None, max_length=100)
    is_active: Optional[bool] = None


class RoleUpdateSchema(RequestSchema):
    role: UserRole
    admin_region_id: Optional[int] = None
