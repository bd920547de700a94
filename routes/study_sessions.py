"""
Study Session Routes - Sessions and practice.

- POST /api/v1/study-sessions                          - Start a session
- GET  /api/v1/study-sessions/<id>                     - Show a session
- POST /api/v1/study-sessions/<id>/end                 - End a session
- GET  /api/v1/study-sessions/practice                 - Flashcards to practice next
- POST /api/v1/study-sessions/practice/<flashcard_id>  - Record an answer
- POST /api/v1/study-sessions/reset                    - Wipe practice history
"""

from flask import Blueprint, abort, current_app, jsonify, request
from flask_login import current_user, login_required
from pydantic import ValidationError

from auth.policies import authorize
from models.study_session import StudySession
from routes.errors import bounded_int, json_body, register_error_handlers
from services import flashcard_service, practice_rules, study_session_service
from services.exceptions import InputValidationError
from services.input_models import PracticeResultInput, validation_messages

bp = Blueprint('study_sessions', __name__, url_prefix='/api/v1/study-sessions')
register_error_handlers(bp)


def _get_session_or_404(session_id):
    study_session = study_session_service.get_by_id(session_id)
    if study_session is None:
        abort(404, description='Study session not found')
    return study_session


@bp.route('', methods=['POST'])
@login_required
def start_session():
    authorize('create', current_user, resource_type=StudySession)
    study_session = study_session_service.start_session(current_user.id)
    return jsonify(study_session.to_dict()), 201


@bp.route('/<int:session_id>', methods=['GET'])
@login_required
def show_session(session_id):
    """
    Show a study session.

    Returns:
        200: {"id", "user_id", "started_at", "ended_at", "is_active", "duration_minutes"}
        403: Session belongs to another user
        404: Session not found
    """
    study_session = _get_session_or_404(session_id)
    authorize('view', current_user, study_session)
    return jsonify(study_session.to_dict())


@bp.route('/<int:session_id>/end', methods=['POST'])
@login_required
def end_session(session_id):
    study_session = _get_session_or_404(session_id)
    authorize('end', current_user, study_session)

    if not study_session_service.end_session(current_user.id, study_session.id):
        abort(404, description='Study session not found')

    return jsonify(study_session.to_dict())


@bp.route('/practice', methods=['GET'])
@login_required
def practice_queue():
    """
    Flashcards to practice next; starts a session when none is running.

    Query Parameters:
        limit (int, optional): How many flashcards, default 10, max 100

    Returns:
        200: {"data": [{"id", "question", "answer"}, ...]}
    """
    limit = bounded_int(
        request.args.get('limit', type=int),
        current_app.config.get('PRACTICE_QUEUE_LIMIT', study_session_service.DEFAULT_PRACTICE_LIMIT)
    )
    flashcards = study_session_service.get_flashcards_for_practice(current_user.id, limit)

    return jsonify({
        'data': [
            {'id': card.id, 'question': card.question, 'answer': card.answer}
            for card in flashcards
        ]
    })


@bp.route('/practice/<int:flashcard_id>', methods=['POST'])
@login_required
def record_practice(flashcard_id):
    """
    Record an answer to a flashcard.

    Request Body, either the verdict:
        {"is_correct": true}
    or the typed answer, compared ignoring case and surrounding whitespace:
        {"answer": "paris"}

    Returns:
        200: {"flashcard_id", "is_correct", "expected"}
        403: Flashcard belongs to another user
        404: Flashcard not found or trashed
        422: Invalid body
    """
    flashcard = flashcard_service.get_by_id(flashcard_id)
    if flashcard is None or flashcard.is_trashed:
        abort(404, description='Flashcard not found')
    authorize('view', current_user, flashcard)

    try:
        data = PracticeResultInput(**json_body())
    except ValidationError as e:
        raise InputValidationError(validation_messages(e))

    if data.answer is not None:
        is_correct = practice_rules.answers_match(data.answer, flashcard.answer)
    else:
        is_correct = data.is_correct

    if not study_session_service.record_practice_result(current_user.id, flashcard.id, is_correct):
        abort(404, description='Flashcard not found')

    return jsonify({
        'flashcard_id': flashcard.id,
        'is_correct': is_correct,
        'expected': flashcard.answer,
    })


@bp.route('/reset', methods=['POST'])
@login_required
def reset_progress():
    study_session_service.reset_practice_progress(current_user.id)
    return jsonify({'message': 'Practice progress has been reset'})
