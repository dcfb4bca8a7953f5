"""
Bulk CSV imports for deals and users.

Rows are validated one by one; bad rows are reported and skipped while good
rows are imported. Only the first MAX_REPORTED_ERRORS messages are returned.

Deals CSV columns:   usuario, valor, status, tipo
Users CSV columns:   first name, last name, username, email, password, country, role [, region]
"""
import csv
import io
import logging
from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, List

from email_validator import EmailNotValidError, validate_email
from sqlalchemy import func

from ..extensions import db
from ..models import (
    Deal,
    DealStatus,
    ProductType,
    REGION_VALUES,
    User,
    UserRole,
)
from .points_config_service import calculate_deal_points
from .points_service import points_service

logger = logging.getLogger(__name__)

DEAL_HEADERS = ['usuario', 'valor', 'status', 'tipo']
USER_HEADERS = ['first name', 'last name', 'username', 'email', 'password', 'country', 'role']
MAX_REPORTED_ERRORS = 10
# deals.deal_value is Numeric(12, 2)
MAX_DEAL_VALUE = Decimal('9999999999.99')

DEAL_STATUSES = [s.value for s in DealStatus]
PRODUCT_TYPES = [p.value for p in ProductType]
ROLES = [r.value for r in UserRole]


class CSVImportError(Exception):
    """The file as a whole cannot be imported (bad headers, empty file)."""

    def __init__(self, message: str, errors: List[str] = None):
        self.message = message
        self.errors = errors or []
        super().__init__(message)


def _read_rows(content: bytes, expected_headers: List[str]) -> List[Dict[str, str]]:
    try:
        text = content.decode('utf-8-sig')
    except UnicodeDecodeError:
        raise CSVImportError('File must be UTF-8 encoded')

    reader = csv.DictReader(io.StringIO(text))
    if not reader.fieldnames:
        raise CSVImportError('CSV file must have at least a header and one data row')

    reader.fieldnames = [name.strip().lower() for name in reader.fieldnames]
    missing = [h for h in expected_headers if h not in reader.fieldnames]
    if missing:
        raise CSVImportError(
            f"CSV must have columns: {', '.join(expected_headers)}. Found: {', '.join(reader.fieldnames)}"
        )

    rows = [
        {key: (value or '').strip() for key, value in row.items() if key is not None}
        for row in reader
    ]
    if not rows:
        raise CSVImportError('CSV file must have at least a header and one data row')
    return rows


class CSVImportService:

    def import_deals(self, content: bytes) -> Dict[str, Any]:
        """
        Import deals. Approved rows earn points through the owner's region
        config and get a ledger credit.
        """
        rows = _read_rows(content, DEAL_HEADERS)
        errors = []
        imported = 0
        now = datetime.utcnow()

        for line, row in enumerate(rows, start=2):
            username = row.get('usuario')
            status = row.get('status', '').lower()
            product_type = row.get('tipo', '').lower()

            if not username:
                errors.append(f'Row {line}: Usuario is required')
                continue
            try:
                value = Decimal(row.get('valor', ''))
            except InvalidOperation:
                errors.append(f'Row {line}: Valor must be a valid number')
                continue
            if not value.is_finite() or value <= 0:
                errors.append(f'Row {line}: Valor must be a positive number')
                continue
            if value > MAX_DEAL_VALUE:
                errors.append(f'Row {line}: Valor must not exceed {MAX_DEAL_VALUE}')
                continue
            if status not in DEAL_STATUSES:
                errors.append(f"Row {line}: Status must be one of {', '.join(DEAL_STATUSES)}")
                continue
            if product_type not in PRODUCT_TYPES:
                errors.append(f"Row {line}: Tipo must be one of {', '.join(PRODUCT_TYPES)}")
                continue

            user = User.query.filter(func.lower(User.username) == username.lower()).first()
            if not user:
                errors.append(f"Row {line}: User '{username}' not found")
                continue

            points = 0
            if status == DealStatus.APPROVED.value:
                points = calculate_deal_points(value, product_type, user.region)

            deal = Deal(
                user_id=user.id,
                product_type=product_type,
                product_name=f'Imported Deal - {product_type}',
                deal_value=value.quantize(Decimal('0.01')),
                quantity=1,
                close_date=now,
                client_info=f'Bulk import from CSV on {now.isoformat()}',
                status=status,
                points_earned=points,
                approved_at=now if status != DealStatus.PENDING.value else None,
            )
            db.session.add(deal)
            db.session.flush()

            if points > 0:
                points_service.add_entry(
                    user.id,
                    points,
                    f'Points earned from bulk imported deal: {deal.product_name}',
                    deal_id=deal.id
                )
            imported += 1

        if imported == 0:
            db.session.rollback()
            raise CSVImportError('No valid deals to import', errors[:MAX_REPORTED_ERRORS])

        db.session.commit()
        logger.info('CSV import: %d deals imported, %d rows rejected', imported, len(errors))
        return {
            'message': f'Successfully imported {imported} deals',
            'imported': imported,
            'errors': errors[:MAX_REPORTED_ERRORS],
        }

    def import_users(self, content: bytes, approved_by: int = None) -> Dict[str, Any]:
        """Import approved, active users."""
        rows = _read_rows(content, USER_HEADERS)
        errors = []
        imported = 0
        seen_usernames, seen_emails = set(), set()

        for line, row in enumerate(rows, start=2):
            username = row.get('username', '')
            email = row.get('email', '').lower()
            password = row.get('password', '')
            role = (row.get('role') or UserRole.USER.value).lower()
            region = (row.get('region') or '').upper() or None

            if not row.get('first name') or not row.get('last name'):
                errors.append(f'Row {line}: First name and last name are required')
                continue
            if len(username) < 3:
                errors.append(f'Row {line}: Username must be at least 3 characters')
                continue
            try:
                validate_email(email, check_deliverability=False)
            except EmailNotValidError:
                errors.append(f'Row {line}: Email is invalid')
                continue
            if len(password) < 6:
                errors.append(f'Row {line}: Password must be at least 6 characters')
                continue
            if not row.get('country'):
                errors.append(f'Row {line}: Country is required')
                continue
            if role not in ROLES:
                errors.append(f"Row {line}: Role must be one of {', '.join(ROLES)}")
                continue
            if region and region not in REGION_VALUES:
                errors.append(f"Row {line}: Region must be one of {', '.join(REGION_VALUES)}")
                continue
            if username.lower() in seen_usernames or User.query.filter(
                func.lower(User.username) == username.lower()
            ).first():
                errors.append(f"Row {line}: Username '{username}' already exists")
                continue
            if email in seen_emails or User.query.filter(func.lower(User.email) == email).first():
                errors.append(f"Row {line}: Email '{email}' already exists")
                continue

            user = User(
                username=username,
                email=email,
                first_name=row['first name'],
                last_name=row['last name'],
                country=row['country'],
                role=role,
                region=region,
            )
            user.set_password(password)
            user.approve(approved_by)
            db.session.add(user)
            seen_usernames.add(username.lower())
            seen_emails.add(email)
            imported += 1

        if imported == 0:
            db.session.rollback()
            raise CSVImportError('No valid users to import', errors[:MAX_REPORTED_ERRORS])

        db.session.commit()
        logger.info('CSV import: %d users imported, %d rows rejected', imported, len(errors))
        return {
            'message': f'Successfully imported {imported} users',
            'imported': imported,
            'errors': errors[:MAX_REPORTED_ERRORS],
        }


# Singleton instance
csv_import_service = CSVImportService()
