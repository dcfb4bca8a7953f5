"""
Business logic services for the partner loyalty program.
"""
from .auth_service import AuthService, auth_service
from .csv_import_service import CSVImportError, CSVImportService, csv_import_service
from .deal_service import DealService, deal_service
from .email_service import EmailService, email_service
from .emblue_service import EMBlueService, emblue_service
from .invitation_service import InvitationService, invitation_service
from .notification_service import NotificationService, notification_service
from .points_config_service import PointsConfigService, points_config_service
from .points_service import PointsService, points_service
from .redemption_service import RedemptionService, redemption_service
from .region_service import RegionService, region_service
from .report_service import ReportService, report_service
from .support_service import SupportService, support_service
from .user_service import UserService, user_service

__all__ = [
    'AuthService', 'auth_service',
    'CSVImportError', 'CSVImportService', 'csv_import_service',
    'DealService', 'deal_service',
    'EmailService', 'email_service',
    'EMBlueService', 'emblue_service',
    'InvitationService', 'invitation_service',
    'NotificationService', 'notification_service',
    'PointsConfigService', 'points_config_service',
    'PointsService', 'points_service',
    'RedemptionService', 'redemption_service',
    'RegionService', 'region_service',
    'ReportService', 'report_service',
    'SupportService', 'support_service',
    'UserService', 'user_service',
]
