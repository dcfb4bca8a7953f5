"""
Region configs and monthly prizes.
"""
import logging
from datetime import date
from typing import Any, Dict, List, Optional

from ..extensions import db
from ..models import MonthlyRegionPrize, RegionConfig, User, UserRole
from ..utils.exceptions import DuplicateError, NotFoundError
from .points_config_service import normalize_region

logger = logging.getLogger(__name__)

DEFAULT_REGION_CONFIGS = [
    ('NOLA', 'ENTERPRISE', 'COLOMBIA', 'NOLA ENTERPRISE COLOMBIA', 10),
    ('NOLA', 'ENTERPRISE', 'CENTRO AMÉRICA', 'NOLA ENTERPRISE CENTRO AMÉRICA', 10),
    ('NOLA', 'SMB', 'COLOMBIA', 'NOLA SMB COLOMBIA', 8),
    ('NOLA', 'SMB', 'CENTRO AMÉRICA', 'NOLA SMB CENTRO AMÉRICA', 8),
    ('NOLA', 'MSSP', None, 'NOLA MSSP', 5),
    ('SOLA', 'ENTERPRISE', None, 'SOLA ENTERPRISE', 12),
    ('SOLA', 'SMB', None, 'SOLA SMB', 10),
    ('BRASIL', 'ENTERPRISE', None, 'BRASIL ENTERPRISE', 15),
    ('BRASIL', 'SMB', None, 'BRASIL SMB', 12),
    ('MEXICO', 'ENTERPRISE', 'PLATINUM', 'MÉXICO ENTERPRISE PLATINUM', 20),
    ('MEXICO', 'ENTERPRISE', 'GOLD', 'MÉXICO ENTERPRISE GOLD', 15),
    ('MEXICO', 'SMB', 'PLATINUM', 'MÉXICO SMB PLATINUM', 12),
    ('MEXICO', 'SMB', 'GOLD', 'MÉXICO SMB GOLD', 10),
    ('MEXICO', 'SMB', 'SILVER & REGISTERED', 'MÉXICO SMB SILVER & REGISTERED', 8),
]

# (month, month name, prize). November and December open the season,
# January through April fall in the following year.
DEFAULT_MONTHLY_PRIZES = [
    (11, 'NOVEMBER', 'RAPPI BONUS'),
    (12, 'DECEMBER', 'WORLD CUP HAT EMBLEM'),
    (1, 'JANUARY', 'WORLD CUP SOCCER BALL'),
    (2, 'FEBRUARY', 'WORLD CUP T-SHIRT'),
    (3, 'MARCH', 'EARBUDS BOSE'),
    (4, 'APRIL', 'SPEAKER'),
]

# Seeded regional admin accounts and the region each one manages
REGIONAL_ADMIN_EMAILS = {
    'admin@nola.com': 'NOLA',
    'admin@sola.com': 'SOLA',
    'admin@brasil.com': 'BRASIL',
    'admin@mexico.com': 'MEXICO',
}


def current_season_year(today: date = None) -> int:
    """Year the current prize season started (seasons run November to April)."""
    today = today or date.today()
    return today.year if today.month >= 11 else today.year - 1


class RegionService:
    """CRUD for region configs and their monthly prizes."""

    # ==================== Region configs ====================

    def list_configs(self, region: str = None, active_only: bool = False) -> List[RegionConfig]:
        query = RegionConfig.query
        region = normalize_region(region)
        if region:
            query = query.filter_by(region=region)
        if active_only:
            query = query.filter_by(is_active=True)
        return query.order_by(RegionConfig.region, RegionConfig.category, RegionConfig.name).all()

    def get_config(self, config_id: int) -> RegionConfig:
        config = RegionConfig.query.get(config_id)
        if not config:
            raise NotFoundError('Region config', config_id)
        return config

    def create_config(self, data: Dict[str, Any]) -> RegionConfig:
        existing = RegionConfig.query.filter_by(
            region=data['region'],
            category=data['category'],
            subcategory=data.get('subcategory')
        ).first()
        if existing:
            raise DuplicateError('Region config', f"{data['region']}/{data['category']}/{data.get('subcategory') or '-'}")

        config = RegionConfig(**data)
        db.session.add(config)
        db.session.commit()
        return config

    def update_config(self, config_id: int, changes: Dict[str, Any]) -> RegionConfig:
        config = self.get_config(config_id)
        for key, value in changes.items():
            setattr(config, key, value)
        db.session.commit()
        return config

    # ==================== Monthly prizes ====================

    def list_prizes(self, month: int = None, year: int = None, region: str = None,
                    include_inactive: bool = False) -> List[MonthlyRegionPrize]:
        query = MonthlyRegionPrize.query.join(RegionConfig)
        if month:
            query = query.filter(MonthlyRegionPrize.month == month)
        if year:
            query = query.filter(MonthlyRegionPrize.year == year)
        region = normalize_region(region)
        if region:
            query = query.filter(RegionConfig.region == region)
        if not include_inactive:
            query = query.filter(MonthlyRegionPrize.is_active.is_(True))
        return query.order_by(MonthlyRegionPrize.year, MonthlyRegionPrize.month, RegionConfig.name).all()

    def get_prize(self, prize_id: int) -> MonthlyRegionPrize:
        prize = MonthlyRegionPrize.query.get(prize_id)
        if not prize:
            raise NotFoundError('Monthly prize', prize_id)
        return prize

    def create_prize(self, data: Dict[str, Any]) -> MonthlyRegionPrize:
        self.get_config(data['region_config_id'])
        prize = MonthlyRegionPrize(**data)
        db.session.add(prize)
        db.session.commit()
        return prize

    def update_prize(self, prize_id: int, changes: Dict[str, Any]) -> MonthlyRegionPrize:
        prize = self.get_prize(prize_id)
        for key, value in changes.items():
            setattr(prize, key, value)
        db.session.commit()
        return prize

    def deactivate_prize(self, prize_id: int) -> MonthlyRegionPrize:
        return self.update_prize(prize_id, {'is_active': False})

    # ==================== Seeding ====================

    def seed_defaults(self, season_year: int) -> Dict[str, int]:
        """
        Create the default region configs and their monthly prizes.

        Configs that already exist are left alone and get no new prizes.
        """
        created_configs = []
        for region, category, subcategory, name, goal in DEFAULT_REGION_CONFIGS:
            exists = RegionConfig.query.filter_by(
                region=region, category=category, subcategory=subcategory
            ).first()
            if exists:
                continue
            config = RegionConfig(
                region=region,
                category=category,
                subcategory=subcategory,
                name=name,
                new_customer_goal_rate=1000,
                renewal_goal_rate=2000,
                monthly_goal_target=goal,
                is_active=True,
            )
            db.session.add(config)
            created_configs.append(config)
        db.session.flush()

        prizes = 0
        for config in created_configs:
            for month, month_name, prize_name in DEFAULT_MONTHLY_PRIZES:
                db.session.add(MonthlyRegionPrize(
                    region_config_id=config.id,
                    month=month,
                    year=season_year if month >= 11 else season_year + 1,
                    prize_name=prize_name,
                    prize_description=f'{month_name} monthly draw for {config.name}',
                    goal_target=config.monthly_goal_target or 10,
                    is_active=True,
                ))
                prizes += 1

        db.session.commit()
        logger.info('Seeded %d region configs and %d monthly prizes', len(created_configs), prizes)
        return {'configs': len(created_configs), 'prizes': prizes}

    def assign_regional_admins(self, mapping: Dict[str, str] = None) -> List[Dict[str, Any]]:
        """
        Point each seeded regional admin at the first config of their region.

        Admins are looked up by email, falling back to username. Returns one
        result entry per mapping row.
        """
        results = []
        for email, region in (mapping or REGIONAL_ADMIN_EMAILS).items():
            config = RegionConfig.query.filter_by(region=region).order_by(RegionConfig.id).first()
            if not config:
                results.append({'email': email, 'region': region, 'assigned': False,
                                'reason': 'No region config found'})
                continue

            user = User.query.filter((User.email == email) | (User.username == email)).first()
            if not user:
                results.append({'email': email, 'region': region, 'assigned': False,
                                'reason': 'User not found'})
                continue

            user.admin_region_id = config.id
            if user.role == UserRole.USER.value:
                user.role = UserRole.REGIONAL_ADMIN.value
            results.append({'email': email, 'region': region, 'assigned': True,
                            'region_config': config.name})

        db.session.commit()
        return results


# Singleton instance
region_service = RegionService()
