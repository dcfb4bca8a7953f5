"""
EMBlue email API client.

Used for the account-approval email when EMBlue credentials are configured.
The API hands out session tokens that last 30 minutes; we reuse a token for
25 minutes before authenticating again.

Configuration:
- EMBLUE_USERNAME / EMBLUE_PASSWORD: API credentials
- EMBLUE_FROM_EMAIL: sender address
- BASE_URL: link included in the approval email
"""
import logging
from datetime import datetime, timedelta
from typing import Optional

import requests
from flask import current_app

logger = logging.getLogger(__name__)


class EMBlueService:
    """Thin wrapper over the EMBlue JSON service."""

    BASE_URL = 'https://api.embluemail.com/Services/Emblue3Service.svc/json'
    TOKEN_LIFETIME = timedelta(minutes=25)
    TIMEOUT = 10
    CAMPAIGN_NAME = 'User Approval Notification'

    def __init__(self):
        self.token: Optional[str] = None
        self.token_expires_at: Optional[datetime] = None

    @property
    def is_configured(self) -> bool:
        config = current_app.config
        return bool(config.get('EMBLUE_USERNAME') and config.get('EMBLUE_PASSWORD'))

    def _has_valid_token(self) -> bool:
        return bool(self.token and self.token_expires_at and datetime.utcnow() < self.token_expires_at)

    def reset(self) -> None:
        """Forget the cached session token."""
        self.token = None
        self.token_expires_at = None

    def authenticate(self) -> bool:
        """Fetch a fresh session token."""
        try:
            response = requests.post(
                f'{self.BASE_URL}/Authenticate',
                json={
                    'username': current_app.config.get('EMBLUE_USERNAME'),
                    'password': current_app.config.get('EMBLUE_PASSWORD'),
                },
                timeout=self.TIMEOUT
            )
            data = response.json() if response.content else {}
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error('EMBlue authentication error: %s', e)
            return False

        token = data.get('Token') if isinstance(data, dict) else None
        if not token:
            logger.error('EMBlue authentication failed: %s', data)
            return False

        self.token = token
        self.token_expires_at = datetime.utcnow() + self.TOKEN_LIFETIME
        return True

    def ensure_authenticated(self) -> bool:
        if self._has_valid_token():
            return True
        return self.authenticate()

    def send_email(self, to: str, subject: str, html_content: str, text_content: str = '') -> bool:
        """Send one email through SendMailExpress. Never raises."""
        if not self.ensure_authenticated():
            logger.error('Failed to authenticate with EMBlue')
            return False

        try:
            response = requests.post(
                f'{self.BASE_URL}/SendMailExpress',
                json={
                    'token': self.token,
                    'recipientEmail': to,
                    'fromEmail': current_app.config.get('EMBLUE_FROM_EMAIL'),
                    'subject': subject,
                    'htmlBody': html_content,
                    'textBody': text_content or '',
                    'campaignName': self.CAMPAIGN_NAME,
                },
                timeout=self.TIMEOUT
            )
            data = response.json() if response.content else {}
        except (requests.exceptions.RequestException, ValueError) as e:
            logger.error('Error sending email via EMBlue: %s', e)
            return False

        if isinstance(data, dict) and data.get('Code') == 0:
            logger.info('EMBlue email sent to %s', to)
            return True

        logger.error('EMBlue send email error: %s', data)
        return False

    def send_approval_email(self, email: str, first_name: str, last_name: str) -> bool:
        """Tell a partner their account was approved."""
        base_url = current_app.config.get('BASE_URL')
        subject = 'Welcome! Your account has been approved'
        text_content = (
            f'Dear {first_name} {last_name},\n\n'
            'Your Loyalty Program account has been approved by our administrators.\n\n'
            'You can now:\n'
            '- Register deals and earn points for your sales\n'
            '- Redeem points for rewards\n'
            '- Follow your progress on your dashboard\n\n'
            f'Access your account at: {base_url}\n\n'
            'Loyalty Program Team\n'
        )
        html_content = (
            '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
            '<h2>Account approved!</h2>'
            f'<p>Dear {first_name} {last_name},</p>'
            '<p>Your Loyalty Program account has been approved by our administrators.</p>'
            f'<p><a href="{base_url}" style="background-color: #28a745; color: white; padding: 12px 24px; '
            'text-decoration: none; border-radius: 5px; font-weight: bold;">Go to my account</a></p>'
            '</div>'
        )
        return self.send_email(email, subject, html_content, text_content)

    def test_connection(self) -> bool:
        try:
            response = requests.post(f'{self.BASE_URL}/CheckConnection', json={}, timeout=self.TIMEOUT)
        except requests.exceptions.RequestException as e:
            logger.error('EMBlue connection test failed: %s', e)
            return False
        return response.status_code == 200


# Singleton instance
emblue_service = EMBlueService()
