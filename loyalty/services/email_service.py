"""
Transactional email via Brevo.

Sends:
- Invitations and welcome emails for invited partners
- Account approval
- Deal approved / redemption approved notices to partners
- Redemption requests and new support tickets to admins
- Password reset links

Every sender returns a bool and never raises: a failed email is logged and
the caller carries on. With no BREVO_API_KEY configured the email is logged
as a simulated send and reported as delivered, so local setups work without
credentials.

Configuration:
- BREVO_API_KEY: Brevo API key
- FROM_EMAIL / FROM_NAME: sender identity
- APP_URL: base URL for links in emails
"""
import logging
from typing import Any, Dict, Iterable, Optional

import sib_api_v3_sdk
from markupsafe import escape
from sib_api_v3_sdk.rest import ApiException
from flask import current_app

logger = logging.getLogger(__name__)


class EmailService:
    """Brevo-backed sender for all partner and admin emails."""

    DEFAULT_TEMPLATES = {
        'invite': {
            'subject': 'You are invited to the Loyalty Program',
            'text': '''Hi {first_name} {last_name},

You have been invited to join the Loyalty Program.

Complete your registration here: {invite_link}

This link expires in {ttl_days} days.
''',
            'html': '''
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Welcome to the Loyalty Program</h2>
    <p>Hi {first_name} {last_name},</p>
    <p>You have been invited to join the Loyalty Program. Register your deals, earn points and redeem them for rewards.</p>
    <p style="text-align: center;">
        <a href="{invite_link}" style="display: inline-block; background: #3b82f6; color: white; padding: 12px 30px; text-decoration: none; border-radius: 5px;">Complete registration</a>
    </p>
    <p style="color: #6b7280; font-size: 12px;">This link expires in {ttl_days} days.</p>
</div>
'''
        },
        'welcome': {
            'subject': 'Registration complete - Loyalty Program',
            'text': '''Hi {first_name} {last_name},

Your registration is complete. You can log in at {login_link}.
''',
            'html': '''
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Registration complete</h2>
    <p>Hi {first_name} {last_name},</p>
    <p>Your account is ready. Start registering deals to earn points.</p>
    <p><a href="{login_link}">Log in</a></p>
</div>
'''
        },
        'approval': {
            'subject': 'Your account is active - Loyalty Program',
            'text': '''Hi {first_name} {last_name},

An administrator approved your account. You can log in at {login_link}.
''',
            'html': '''
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Your account is active</h2>
    <p>Hi {first_name} {last_name},</p>
    <p>An administrator approved your account.</p>
    <p><a href="{login_link}">Log in</a></p>
</div>
'''
        },
        'deal_approved': {
            'subject': 'Deal approved - points earned',
            'text': '''Hi {first_name},

Your deal "{product_name}" ({deal_value}) was approved and earned {points} points.
''',
            'html': '''
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Deal approved</h2>
    <p>Hi {first_name},</p>
    <p>Your deal <strong>{product_name}</strong> ({deal_value}) was approved.</p>
    <p style="font-size: 24px; color: #10b981;"><strong>+{points} points</strong></p>
    <p><a href="{app_url}">View your dashboard</a></p>
</div>
'''
        },
        'redemption_approved': {
            'subject': 'Redemption approved - your reward is on its way',
            'text': '''Hi {first_name},

Your redemption of "{reward_name}" for {points_cost} points was approved.
''',
            'html': '''
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>Redemption approved</h2>
    <p>Hi {first_name},</p>
    <p>Your redemption of <strong>{reward_name}</strong> for {points_cost} points was approved.</p>
    <p><a href="{app_url}/rewards">Track your rewards</a></p>
</div>
'''
        },
        'redemption_request': {
            'subject': 'New points redemption request',
            'text': '''{user_name} ({user_email}) requested "{reward_name}" for {points_cost} points.

Review it at {app_url}/admin
''',
            'html': '''
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>New redemption request</h2>
    <p><strong>{user_name}</strong> ({user_email}) requested <strong>{reward_name}</strong> for {points_cost} points.</p>
    <p><a href="{app_url}/admin">Review request</a></p>
</div>
'''
        },
        'support_ticket': {
            'subject': 'New support ticket',
            'text': '''{user_name} ({user_email}) opened a {priority} priority ticket.

Subject: {subject}

{message}

Respond at {app_url}/admin
''',
            'html': '''
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <h2>New support ticket</h2>
    <p><strong>{user_name}</strong> ({user_email}) opened a <strong>{priority}</strong> priority ticket.</p>
    <p><strong>Subject:</strong> {subject}</p>
    <p style="background: #f5f5f5; padding: 10px; border-radius: 4px;">{message}</p>
    <p><a href="{app_url}/admin">Respond</a></p>
</div>
'''
        },
        'password_reset': {
            'subject': 'Reset your password',
            'text': '''Hi {first_name},

Reset your password here: {reset_link}

This link expires in {ttl_minutes} minutes. If you did not request it, ignore this email.
''',
            'html': '''
<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">
    <p>Hi {first_name},</p>
    <p><a href="{reset_link}">Reset your password</a></p>
    <p style="color: #6b7280; font-size: 12px;">This link expires in {ttl_minutes} minutes. If you did not request it, ignore this email.</p>
</div>
'''
        },
    }

    def _config(self, key: str, default: Any = None) -> Any:
        return current_app.config.get(key, default)

    @property
    def app_url(self) -> str:
        return (self._config('APP_URL') or '').rstrip('/')

    def _get_api(self) -> Optional[sib_api_v3_sdk.TransactionalEmailsApi]:
        """Build the Brevo client, or None when no API key is configured."""
        api_key = self._config('BREVO_API_KEY')
        if not api_key:
            return None

        configuration = sib_api_v3_sdk.Configuration()
        configuration.api_key['api-key'] = api_key
        return sib_api_v3_sdk.TransactionalEmailsApi(sib_api_v3_sdk.ApiClient(configuration))

    def _render_template(self, template_key: str, variables: Dict[str, Any]) -> Dict[str, str]:
        template = self.DEFAULT_TEMPLATES[template_key]
        variables.setdefault('app_url', self.app_url)
        return {
            'subject': template['subject'].format(**variables),
            'text': template['text'].format(**variables),
            # html body only; values are escaped
            'html': template['html'].format(**{key: escape(value) for key, value in variables.items()}),
        }

    def _send_email(self, to_email: str, to_name: Optional[str], template_key: str, variables: Dict[str, Any]) -> bool:
        """Render and send one email. Never raises."""
        try:
            rendered = self._render_template(template_key, variables)
        except (KeyError, IndexError) as e:
            logger.error("Failed to render %s email: %s", template_key, e)
            return False

        api = self._get_api()
        if api is None:
            logger.info("BREVO_API_KEY not configured, simulated %s email to %s: %s",
                        template_key, to_email, rendered['subject'])
            return True

        message = sib_api_v3_sdk.SendSmtpEmail(
            to=[{'email': to_email, 'name': to_name or to_email}],
            sender={'email': self._config('FROM_EMAIL'), 'name': self._config('FROM_NAME')},
            subject=rendered['subject'],
            html_content=rendered['html'],
            text_content=rendered['text'],
        )

        try:
            api.send_transac_email(message)
        except ApiException as e:
            logger.error("Brevo rejected %s email to %s: %s", template_key, to_email, e)
            return False
        except Exception as e:
            logger.error("Failed to send %s email to %s: %s", template_key, to_email, e)
            return False

        logger.info("Email sent to %s: %s", to_email, rendered['subject'])
        return True

    # ==================== Partner emails ====================

    def send_invite_email(self, email: str, first_name: str, last_name: str, invite_token: str) -> bool:
        invite_link = f'{self.app_url}/register?token={invite_token}'
        return self._send_email(email, f'{first_name} {last_name}', 'invite', {
            'first_name': first_name,
            'last_name': last_name,
            'invite_link': invite_link,
            'ttl_days': self._config('INVITE_TOKEN_TTL_DAYS', 7),
        })

    def send_welcome_email(self, email: str, first_name: str, last_name: str) -> bool:
        return self._send_email(email, f'{first_name} {last_name}', 'welcome', {
            'first_name': first_name,
            'last_name': last_name,
            'login_link': f'{self.app_url}/login',
        })

    def send_approval_email(self, email: str, first_name: str, last_name: str) -> bool:
        return self._send_email(email, f'{first_name} {last_name}', 'approval', {
            'first_name': first_name,
            'last_name': last_name,
            'login_link': f'{self.app_url}/login',
        })

    def send_deal_approved_email(self, user, deal) -> bool:
        return self._send_email(user.email, user.full_name, 'deal_approved', {
            'first_name': user.first_name,
            'product_name': deal.product_name,
            'deal_value': f'${deal.deal_value:,.2f}',
            'points': deal.points_earned,
        })

    def send_redemption_approved_email(self, user, reward) -> bool:
        return self._send_email(user.email, user.full_name, 'redemption_approved', {
            'first_name': user.first_name,
            'reward_name': reward.name,
            'points_cost': reward.points_cost,
        })

    def send_password_reset_email(self, user, reset_token: str) -> bool:
        return self._send_email(user.email, user.full_name, 'password_reset', {
            'first_name': user.first_name,
            'reset_link': f'{self.app_url}/reset-password?token={reset_token}',
            'ttl_minutes': self._config('RESET_TOKEN_TTL_MINUTES', 60),
        })

    # ==================== Admin emails ====================

    def send_redemption_request_to_admins(self, admins: Iterable, user, reward) -> int:
        """Email each admin about a new redemption. Returns how many sends succeeded."""
        sent = 0
        for admin in admins:
            if self._send_email(admin.email, admin.full_name, 'redemption_request', {
                'user_name': user.full_name,
                'user_email': user.email,
                'reward_name': reward.name,
                'points_cost': reward.points_cost,
            }):
                sent += 1
        return sent

    def send_support_ticket_to_admins(self, admins: Iterable, user, ticket) -> int:
        sent = 0
        for admin in admins:
            if self._send_email(admin.email, admin.full_name, 'support_ticket', {
                'user_name': user.full_name,
                'user_email': user.email,
                'subject': ticket.subject,
                'message': ticket.message,
                'priority': ticket.priority,
            }):
                sent += 1
        return sent


# Singleton instance
email_service = EmailService()
