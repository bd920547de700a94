"""
Flashcard Routes - CRUD and trash bin endpoints.

- GET    /api/v1/flashcards                  - Paginated active flashcards
- POST   /api/v1/flashcards                  - Create a flashcard
- GET    /api/v1/flashcards/<id>             - Show one flashcard
- PUT    /api/v1/flashcards/<id>             - Replace question and answer
- PATCH  /api/v1/flashcards/<id>             - Change question and/or answer
- DELETE /api/v1/flashcards/<id>             - Move to the trash bin
- GET    /api/v1/flashcards/trash            - Paginated trashed flashcards
- POST   /api/v1/flashcards/<id>/restore     - Restore from the trash bin
- DELETE /api/v1/flashcards/<id>/force       - Delete permanently
- POST   /api/v1/flashcards/trash/restore    - Restore the whole trash bin
- DELETE /api/v1/flashcards/trash            - Empty the trash bin
"""

from flask import Blueprint, abort, current_app, jsonify, request
from flask_login import current_user, login_required

from auth.policies import authorize
from models.flashcard import Flashcard
from routes.errors import bounded_int, json_body, register_error_handlers
from services import flashcard_service

bp = Blueprint('flashcards', __name__, url_prefix='/api/v1/flashcards')
register_error_handlers(bp)


def _page_args():
    page = bounded_int(request.args.get('page', type=int), 1, maximum=10_000)
    per_page = bounded_int(
        request.args.get('per_page', type=int),
        current_app.config.get('FLASHCARDS_PER_PAGE', flashcard_service.DEFAULT_PER_PAGE)
    )
    return page, per_page


def _paginated(pagination):
    return {
        'data': [flashcard.to_dict() for flashcard in pagination.items],
        'meta': {
            'page': pagination.page,
            'per_page': pagination.per_page,
            'total': pagination.total,
            'pages': pagination.pages,
        }
    }


def _get_flashcard_or_404(flashcard_id, trashed_ok=False):
    flashcard = flashcard_service.get_by_id(flashcard_id)
    if flashcard is None or (flashcard.is_trashed and not trashed_ok):
        abort(404, description='Flashcard not found')
    return flashcard


@bp.route('', methods=['GET'])
@login_required
def list_flashcards():
    """
    List the current user's active flashcards, newest first.

    Query Parameters:
        page (int, optional): Page number, default 1
        per_page (int, optional): Page size, default 15, max 100

    Returns:
        200: {"data": [...], "meta": {"page", "per_page", "total", "pages"}}
    """
    authorize('view_any', current_user, resource_type=Flashcard)
    page, per_page = _page_args()

    pagination = flashcard_service.get_all_for_user(current_user.id, page, per_page)
    flashcard_service.list_viewed(current_user.id)

    return jsonify(_paginated(pagination))


@bp.route('', methods=['POST'])
@login_required
def create_flashcard():
    """
    Create a flashcard.

    Request Body:
        {"question": "What is the capital of France?", "answer": "Paris"}

    Returns:
        201: The created flashcard
        422: {"error": "Validation failed", "messages": [...]}
    """
    authorize('create', current_user, resource_type=Flashcard)
    data = json_body()

    flashcard = flashcard_service.create(current_user.id, data.get('question'), data.get('answer'))
    return jsonify(flashcard.to_dict()), 201


@bp.route('/<int:flashcard_id>', methods=['GET'])
@login_required
def show_flashcard(flashcard_id):
    flashcard = _get_flashcard_or_404(flashcard_id)
    authorize('view', current_user, flashcard)
    return jsonify(flashcard.to_dict())


@bp.route('/<int:flashcard_id>', methods=['PUT', 'PATCH'])
@login_required
def update_flashcard(flashcard_id):
    """
    Update a flashcard. PUT needs both fields, PATCH keeps the missing ones.

    Returns:
        200: The updated flashcard
        403: Flashcard belongs to another user
        404: Flashcard not found
        422: Validation failed
    """
    flashcard = _get_flashcard_or_404(flashcard_id)
    authorize('update', current_user, flashcard)
    data = json_body()

    if request.method == 'PATCH':
        question = data.get('question', flashcard.question)
        answer = data.get('answer', flashcard.answer)
    else:
        question = data.get('question')
        answer = data.get('answer')

    if not flashcard_service.update(current_user.id, flashcard.id, question, answer):
        abort(404, description='Flashcard not found')

    return jsonify(flashcard.to_dict())


@bp.route('/<int:flashcard_id>', methods=['DELETE'])
@login_required
def delete_flashcard(flashcard_id):
    flashcard = _get_flashcard_or_404(flashcard_id)
    authorize('delete', current_user, flashcard)

    if not flashcard_service.delete(current_user.id, flashcard.id):
        abort(404, description='Flashcard not found')

    return jsonify({'message': 'Flashcard moved to the trash bin', 'id': flashcard_id})


@bp.route('/trash', methods=['GET'])
@login_required
def list_trash():
    authorize('view_any', current_user, resource_type=Flashcard)
    page, per_page = _page_args()

    pagination = flashcard_service.get_deleted_for_user(current_user.id, page, per_page)
    return jsonify(_paginated(pagination))


@bp.route('/<int:flashcard_id>/restore', methods=['POST'])
@login_required
def restore_flashcard(flashcard_id):
    """
    Restore a trashed flashcard.

    Returns:
        200: The restored flashcard
        403: Flashcard belongs to another user
        404: Flashcard not found
        409: Flashcard is not in the trash bin
    """
    flashcard = _get_flashcard_or_404(flashcard_id, trashed_ok=True)
    authorize('restore', current_user, flashcard)

    if not flashcard_service.restore(current_user.id, flashcard.id):
        abort(404, description='Flashcard not found')

    return jsonify(flashcard.to_dict())


@bp.route('/<int:flashcard_id>/force', methods=['DELETE'])
@login_required
def force_delete_flashcard(flashcard_id):
    flashcard = _get_flashcard_or_404(flashcard_id, trashed_ok=True)
    authorize('force_delete', current_user, flashcard)

    if not flashcard_service.force_delete(current_user.id, flashcard.id):
        abort(404, description='Flashcard not found')

    return jsonify({'message': 'Flashcard permanently deleted', 'id': flashcard_id})


@bp.route('/trash/restore', methods=['POST'])
@login_required
def restore_all():
    count = flashcard_service.restore_all_for_user(current_user.id)
    return jsonify({'restored': count})


@bp.route('/trash', methods=['DELETE'])
@login_required
def empty_trash():
    count = flashcard_service.force_delete_all_for_user(current_user.id)
    return jsonify({'deleted': count})
