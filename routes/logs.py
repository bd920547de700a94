"""
Log Routes - Read-only access to the activity log.

- GET /api/v1/logs?limit=50         - The user's log entries, newest first
- GET /api/v1/logs/latest?limit=10  - The user's latest activity
"""

from flask import Blueprint, jsonify, request
from flask_login import current_user, login_required

from auth.policies import authorize
from models.log import Log
from routes.errors import bounded_int, register_error_handlers
from services import log_service

bp = Blueprint('logs', __name__, url_prefix='/api/v1/logs')
register_error_handlers(bp)


@bp.route('', methods=['GET'])
@login_required
def list_logs():
    authorize('view_any', current_user, resource_type=Log)
    limit = bounded_int(request.args.get('limit', type=int), 50, maximum=500)
    return jsonify({'data': log_service.get_logs_for_user(current_user.id, limit)})


@bp.route('/latest', methods=['GET'])
@login_required
def latest_activity():
    authorize('view_activity', current_user, resource_type=Log)
    limit = bounded_int(request.args.get('limit', type=int), 10)
    return jsonify({'data': log_service.get_latest_activity_for_user(current_user.id, limit)})
