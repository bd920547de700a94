"""Transaction boundary shared by the services"""
import logging
from contextlib import contextmanager

from models import db

logger = logging.getLogger(__name__)


@contextmanager
def unit_of_work():
    """
    Commit everything done inside the block, or roll all of it back.

    Usage:
        with unit_of_work() as session:
            flashcard_repository.add(flashcard)
            log_service.log_flashcard_creation(user_id, flashcard)

    Nested blocks join the outer transaction: only the outermost block
    commits, so a service can call another service without splitting the
    work into two transactions.
    """
    session = db.session
    outermost = not session.info.get('unit_of_work_active', False)
    if outermost:
        session.info['unit_of_work_active'] = True
    try:
        yield session
        if outermost:
            session.commit()
    except Exception:
        if outermost:
            logger.debug('Rolling back unit of work', exc_info=True)
            session.rollback()
        raise
    finally:
        if outermost:
            session.info.pop('unit_of_work_active', None)
