"""
Per-region points configuration.

Each region (NOLA, SOLA, BRASIL, MEXICO) carries its own earning rates,
grand prize threshold and optional redemption window. A region without a
stored row uses DEFAULT_POINTS_CONFIG.

Lookups are memoized in the Flask cache and invalidated on every write.
"""
import logging
import math
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Optional

from ..extensions import db
from ..models import PointsConfig, DEFAULT_POINTS_CONFIG, REGION_VALUES, ProductType
from ..utils.cache import cache
from ..utils.exceptions import ValidationError

logger = logging.getLogger(__name__)

RATE_FIELDS = {
    ProductType.SOFTWARE.value: 'software_rate',
    ProductType.HARDWARE.value: 'hardware_rate',
    ProductType.EQUIPMENT.value: 'equipment_rate',
}

UPDATABLE_FIELDS = (
    'software_rate',
    'hardware_rate',
    'equipment_rate',
    'grand_prize_threshold',
    'default_new_customer_goal_rate',
    'default_renewal_goal_rate',
    'redemption_start_date',
    'redemption_end_date',
)


def normalize_region(region: Optional[str]) -> Optional[str]:
    """Uppercase a region name; None passes through. Unknown names raise ValidationError."""
    if region is None or region == '':
        return None
    normalized = str(region).strip().upper()
    if normalized not in REGION_VALUES:
        raise ValidationError(f"Unknown region '{region}'. Expected one of: {', '.join(REGION_VALUES)}", 'region')
    return normalized


@cache.memoize(timeout=300)
def get_region_rates(region: Optional[str]) -> Dict[str, Any]:
    """
    Effective configuration for a normalized region name.

    Returns the stored row's values merged over the defaults, with ``id``
    None when the region has no stored row.
    """
    data = dict(DEFAULT_POINTS_CONFIG, id=None, region=region)
    if region is None:
        return data

    config = PointsConfig.query.filter_by(region=region).first()
    if config:
        data.update(config.to_dict())
        # Keep dates as date objects for window checks
        data['redemption_start_date'] = config.redemption_start_date
        data['redemption_end_date'] = config.redemption_end_date
    return data


def invalidate_region_rates(region: Optional[str]) -> None:
    cache.delete_memoized(get_region_rates, region)


def calculate_deal_points(deal_value, product_type: str, region: Optional[str]) -> int:
    """
    Points for a deal: floor(deal_value / rate) where rate is the region's
    dollars-per-point for the product type.
    """
    rates = get_region_rates(normalize_region(region))
    rate_field = RATE_FIELDS.get(product_type)
    if rate_field is None:
        raise ValidationError(f"Unknown product type '{product_type}'", 'product_type')

    rate = rates[rate_field]
    if not rate or rate <= 0:
        return 0

    value = Decimal(str(deal_value))
    if value <= 0:
        return 0
    return int(math.floor(value / Decimal(rate)))


def is_redemption_open(region: Optional[str], on_date: date = None) -> bool:
    """True when ``on_date`` (default today) falls inside the region's redemption window."""
    rates = get_region_rates(normalize_region(region))
    today = on_date or date.today()
    start, end = rates.get('redemption_start_date'), rates.get('redemption_end_date')
    if start and today < start:
        return False
    if end and today > end:
        return False
    return True


class PointsConfigService:
    """Reads and writes the per-region points configuration."""

    def get_config(self, region: str) -> Dict[str, Any]:
        """Serializable config for a region (defaults with id None when unset)."""
        region = normalize_region(region)
        if region is None:
            raise ValidationError('Region is required', 'region')

        data = dict(get_region_rates(region))
        for key in ('redemption_start_date', 'redemption_end_date'):
            if isinstance(data.get(key), date):
                data[key] = data[key].isoformat()
        return data

    def update_config(self, region: str, changes: Dict[str, Any], updated_by: int = None) -> PointsConfig:
        """
        Upsert the region's row with ``changes``.

        The redemption window is re-validated against the merged result so a
        partial update cannot leave end before start.
        """
        region = normalize_region(region)
        if region is None:
            raise ValidationError('Region is required', 'region')

        config = PointsConfig.query.filter_by(region=region).first()
        if config is None:
            config = PointsConfig(region=region, **{
                key: DEFAULT_POINTS_CONFIG[key] for key in UPDATABLE_FIELDS
            })
            db.session.add(config)

        for key, value in changes.items():
            if key in UPDATABLE_FIELDS:
                setattr(config, key, value)

        start, end = config.redemption_start_date, config.redemption_end_date
        if start and end and end < start:
            raise ValidationError('Redemption end date must be on or after the start date', 'redemption_end_date')

        config.updated_by = updated_by
        db.session.commit()
        invalidate_region_rates(region)

        logger.info('Points config for %s updated by user %s: %s', region, updated_by, sorted(changes))
        return config

    def seed_defaults(self) -> int:
        """Create a default row for each region that has none. Returns rows created."""
        created = 0
        for region in REGION_VALUES:
            if PointsConfig.query.filter_by(region=region).first():
                continue
            db.session.add(PointsConfig(region=region, **{
                key: DEFAULT_POINTS_CONFIG[key] for key in UPDATABLE_FIELDS
            }))
            created += 1
        db.session.commit()
        for region in REGION_VALUES:
            invalidate_region_rates(region)
        return created


# Singleton instance
points_config_service = PointsConfigService()
