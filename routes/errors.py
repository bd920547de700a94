"""JSON error responses shared by the /api/v1 blueprints"""
import logging

from flask import jsonify, request
from werkzeug.exceptions import HTTPException

from models import db
from services.exceptions import AuthorizationError, InputValidationError, InvalidTransitionError

logger = logging.getLogger(__name__)


def register_error_handlers(bp):
    """
    Attach the API error mapping to a blueprint.

    - InputValidationError -> 422 with the list of messages
    - AuthorizationError -> 403
    - InvalidTransitionError -> 409
    - HTTP errors (404 from abort, 405, ...) -> their own status as JSON
    - anything else -> rollback, logged traceback, 500
    """

    @bp.errorhandler(InputValidationError)
    def handle_validation_error(e):
        return jsonify({'error': 'Validation failed', 'messages': e.messages}), 422

    @bp.errorhandler(AuthorizationError)
    def handle_authorization_error(e):
        return jsonify({'error': str(e)}), 403

    @bp.errorhandler(InvalidTransitionError)
    def handle_invalid_transition(e):
        return jsonify({'error': str(e)}), 409

    @bp.errorhandler(HTTPException)
    def handle_http_error(e):
        return jsonify({'error': e.description}), e.code

    @bp.errorhandler(Exception)
    def handle_unexpected_error(e):
        db.session.rollback()
        logger.exception(f'Unhandled error in {bp.name}: {e}')
        return jsonify({'error': 'Server error'}), 500


def json_body():
    """The request's JSON object, or an empty dict when the body is missing or not JSON"""
    data = request.get_json(silent=True)
    return data if isinstance(data, dict) else {}


def bounded_int(value, default, minimum=1, maximum=100):
    """Clamp an optional integer query argument"""
    if value is None:
        return default
    return max(minimum, min(value, maximum))
