"""
Statistics Routes

- GET /api/v1/statistics                   - Counters, success rate and completion
- GET /api/v1/statistics/success-rate      - Correct answers as a percentage
- GET /api/v1/statistics/average-duration  - Average study session length in minutes
- GET /api/v1/statistics/total-time        - Total study time in minutes
"""

from flask import Blueprint, jsonify
from flask_login import current_user, login_required

from auth.policies import authorize
from models.statistic import Statistic
from routes.errors import register_error_handlers
from services import statistic_service

bp = Blueprint('statistics', __name__, url_prefix='/api/v1/statistics')
register_error_handlers(bp)


@bp.route('', methods=['GET'])
@login_required
def show_statistics():
    """
    Returns:
        200: {
            "flashcards_created": 12,
            "study_sessions": 3,
            "correct_answers": 20,
            "incorrect_answers": 5,
            "success_rate": 80.0,
            "completion_percentage": 75.0
        }
    """
    authorize('view_any', current_user, resource_type=Statistic)
    statistics = statistic_service.get_statistics_for_user(current_user.id)
    statistic_service.statistics_viewed(current_user.id)
    return jsonify(statistics)


@bp.route('/success-rate', methods=['GET'])
@login_required
def success_rate():
    authorize('view_any', current_user, resource_type=Statistic)
    return jsonify({'success_rate': statistic_service.get_practice_success_rate(current_user.id)})


@bp.route('/average-duration', methods=['GET'])
@login_required
def average_duration():
    authorize('view_any', current_user, resource_type=Statistic)
    return jsonify({
        'average_duration_minutes': statistic_service.get_average_study_session_duration(current_user.id)
    })


@bp.route('/total-time', methods=['GET'])
@login_required
def total_time():
    authorize('view_any', current_user, resource_type=Statistic)
    return jsonify({'total_study_minutes': statistic_service.get_total_study_time(current_user.id)})
