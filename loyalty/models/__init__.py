"""
Database models for the partner loyalty platform.
Users and regions, deals, the points ledger, rewards and redemptions,
campaigns.
"""
from .user import (
    User,
    UserRole,
    Region,
    RegionCategory,
    ADMIN_ROLES,
    FULL_ADMIN_ROLES,
    REGION_VALUES,
)
from .region import RegionConfig, MonthlyRegionPrize
from .points_config import PointsConfig, DEFAULT_POINTS_CONFIG
from .deal import Deal, DealStatus, DealType, ProductType
from .reward import Reward, UserReward, RedemptionStatus, ShipmentStatus, SHIPMENT_ORDER
from .points_history import PointsHistory
from .support_ticket import SupportTicket, TicketStatus, TicketPriority, TICKET_TRANSITIONS
from .notification import Notification, NotificationType
from .campaign import Campaign

__all__ = [
    'User',
    'UserRole',
    'Region',
    'RegionCategory',
    'ADMIN_ROLES',
    'FULL_ADMIN_ROLES',
    'REGION_VALUES',
    'RegionConfig',
    'MonthlyRegionPrize',
    'PointsConfig',
    'DEFAULT_POINTS_CONFIG',
    'Deal',
    'DealStatus',
    'DealType',
    'ProductType',
    'Reward',
    'UserReward',
    'RedemptionStatus',
    'ShipmentStatus',
    'SHIPMENT_ORDER',
    'PointsHistory',
    'SupportTicket',
    'TicketStatus',
    'TicketPriority',
    'TICKET_TRANSITIONS',
    'Notification',
    'NotificationType',
    'Campaign',
]
