"""Request validation schemas"""

from .base import RequestSchema, parse_body
from .auth import (
    LoginSchema,
    RegisterSchema,
    RegisterWithTokenSchema,
    RefreshSchema,
    ForgotPasswordSchema,
    ResetPasswordSchema,
)
from .deal import DealCreateSchema, DealUpdateSchema
from .reward import (
    RewardCreateSchema,
    RewardUpdateSchema,
    RedeemSchema,
    RejectSchema,
    ShipmentUpdateSchema,
)
from .points_config import PointsConfigUpdateSchema
from .region import (
    RegionConfigCreateSchema,
    RegionConfigUpdateSchema,
    MonthlyPrizeCreateSchema,
    MonthlyPrizeUpdateSchema,
)
from .support import SupportTicketCreateSchema, SupportTicketUpdateSchema
from .campaign import CampaignCreateSchema, CampaignUpdateSchema
from .user import (
    InviteSchema,
    BulkInviteSchema,
    AdminUserCreateSchema,
    AdminUserUpdateSchema,
    RoleUpdateSchema,
)
