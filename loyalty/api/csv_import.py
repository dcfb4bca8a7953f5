"""
CSV bulk import API.

Provides endpoints for importing deals and users from CSV files.
"""
from flask import Blueprint, g, jsonify, request

from ..middleware.auth import require_full_admin
from ..services.csv_import_service import CSVImportError, csv_import_service
from ..utils.errors import ErrorCode, bad_request

csv_import_bp = Blueprint('csv_import', __name__)


def _uploaded_csv():
    if 'file' not in request.files:
        return None, bad_request('No file provided')

    file = request.files['file']
    if not file.filename or not file.filename.lower().endswith('.csv'):
        return None, bad_request('File must be a CSV')

    return file.read(), None


@csv_import_bp.route('/process', methods=['POST'])
@require_full_admin
def import_deals():
    """
    Import deals from a CSV upload.

    Form data:
        file: CSV with columns usuario, valor, status, tipo

    Returns:
        {message, imported, errors (first 10)}; 400 when no row is valid
    """
    content, error = _uploaded_csv()
    if error:
        return error

    try:
        result = csv_import_service.import_deals(content)
    except CSVImportError as e:
        return bad_request(e.message, ErrorCode.VALIDATION_ERROR, errors=e.errors)

    return jsonify(result)


@csv_import_bp.route('/users/process', methods=['POST'])
@require_full_admin
def import_users():
    """
    Import approved users from a CSV upload.

    Form data:
        file: CSV with columns first name, last name, username, email,
              password, country, role and optional region
    """
    content, error = _uploaded_csv()
    if error:
        return error

    try:
        result = csv_import_service.import_users(content, approved_by=g.current_user.id)
    except CSVImportError as e:
        return bad_request(e.message, ErrorCode.VALIDATION_ERROR, errors=e.errors)

    return jsonify(result)
