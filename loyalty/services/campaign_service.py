"""
Promotional campaigns.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List

from ..extensions import db
from ..models import Campaign
from ..utils.exceptions import NotFoundError, ValidationError

logger = logging.getLogger(__name__)


class CampaignService:

    def list_campaigns(self, include_inactive: bool = True) -> List[Campaign]:
        query = Campaign.query
        if not include_inactive:
            query = query.filter(Campaign.is_active.is_(True))
        return query.order_by(Campaign.created_at.desc(), Campaign.id.desc()).all()

    def list_running(self, at: datetime = None) -> List[Campaign]:
        """Active campaigns whose date range covers ``at`` (default now)."""
        at = at or datetime.utcnow()
        return Campaign.query.filter(
            Campaign.is_active.is_(True),
            Campaign.start_date <= at,
            Campaign.end_date >= at
        ).order_by(Campaign.end_date.asc()).all()

    def get_campaign(self, campaign_id: int) -> Campaign:
        campaign = Campaign.query.get(campaign_id)
        if not campaign:
            raise NotFoundError('Campaign', campaign_id)
        return campaign

    def create_campaign(self, data: Dict[str, Any]) -> Campaign:
        campaign = Campaign(**data)
        db.session.add(campaign)
        db.session.commit()
        logger.info('Campaign %s created (x%s)', campaign.id, campaign.multiplier)
        return campaign

    def update_campaign(self, campaign_id: int, changes: Dict[str, Any]) -> Campaign:
        """Partial update; the merged date range must stay ordered."""
        campaign = self.get_campaign(campaign_id)
        start = changes.get('start_date', campaign.start_date)
        end = changes.get('end_date', campaign.end_date)
        if end < start:
            raise ValidationError('Campaign end date must be on or after the start date', 'end_date')

        for key, value in changes.items():
            setattr(campaign, key, value)
        db.session.commit()
        return campaign

    def deactivate_campaign(self, campaign_id: int) -> Campaign:
        return self.update_campaign(campaign_id, {'is_active': False})


# Singleton instance
campaign_service = CampaignService()
