"""
Ownership policies for flashcards, study sessions, statistics and logs.

Each policy maps an ability name to a check taking the acting user and,
where relevant, the resource. ``authorize`` raises when the check fails;
routes turn that into a 403 response.
"""
import logging

from models.flashcard import Flashcard
from models.log import Log
from models.statistic import Statistic
from models.study_session import StudySession
from services.exceptions import AuthorizationError

logger = logging.getLogger(__name__)


def _owns(user, resource) -> bool:
    return resource is not None and user is not None and resource.user_id == user.id


class FlashcardPolicy:
    def view_any(self, user) -> bool:
        return True

    def create(self, user) -> bool:
        return True

    def view(self, user, flashcard: Flashcard) -> bool:
        return _owns(user, flashcard)

    def update(self, user, flashcard: Flashcard) -> bool:
        return _owns(user, flashcard)

    def delete(self, user, flashcard: Flashcard) -> bool:
        return _owns(user, flashcard)

    def restore(self, user, flashcard: Flashcard) -> bool:
        return _owns(user, flashcard)

    def force_delete(self, user, flashcard: Flashcard) -> bool:
        return _owns(user, flashcard)


class StudySessionPolicy:
    def view_any(self, user) -> bool:
        return True

    def create(self, user) -> bool:
        return True

    def view(self, user, study_session: StudySession) -> bool:
        return _owns(user, study_session)

    def update(self, user, study_session: StudySession) -> bool:
        return _owns(user, study_session)

    def end(self, user, study_session: StudySession) -> bool:
        """Only the owner may end a session, and only while it is running"""
        return _owns(user, study_session) and study_session.is_active

    def view_statistics(self, user, study_session: StudySession) -> bool:
        return _owns(user, study_session)

    def delete(self, user, study_session: StudySession) -> bool:
        return False


class StatisticPolicy:
    def view_any(self, user) -> bool:
        return True

    def view(self, user, statistic: Statistic) -> bool:
        return _owns(user, statistic)

    def update(self, user, statistic: Statistic) -> bool:
        return _owns(user, statistic)

    def delete(self, user, statistic: Statistic) -> bool:
        return False


class LogPolicy:
    # Logs are an append-only audit trail
    def view_any(self, user) -> bool:
        return True

    def create(self, user) -> bool:
        return True

    def view_activity(self, user) -> bool:
        return True

    def view(self, user, log: Log) -> bool:
        return _owns(user, log)

    def update(self, user, log: Log) -> bool:
        return False

    def delete(self, user, log: Log) -> bool:
        return False


POLICIES = {
    Flashcard: FlashcardPolicy(),
    StudySession: StudySessionPolicy(),
    Statistic: StatisticPolicy(),
    Log: LogPolicy(),
}


def policy_for(resource_type) -> object:
    """Policy instance for a model class"""
    try:
        return POLICIES[resource_type]
    except KeyError:
        raise ValueError(f'No policy registered for {resource_type!r}')


def allows(ability: str, user, resource=None, resource_type=None) -> bool:
    """
    Check an ability without raising.

    Args:
        ability: Policy method name, e.g. "update" or "force_delete"
        user: The acting user
        resource: Model instance for per-resource abilities
        resource_type: Model class for abilities without an instance
            (view_any, create, view_activity)
    """
    if resource_type is None:
        if resource is None:
            raise ValueError('Either resource or resource_type is required')
        resource_type = type(resource)

    check = getattr(policy_for(resource_type), ability, None)
    if check is None:
        raise ValueError(f'Unknown ability {ability!r} for {resource_type.__name__}')

    if resource is None:
        return bool(check(user))
    return bool(check(user, resource))


def authorize(ability: str, user, resource=None, resource_type=None) -> None:
    """
    Raise when the policy denies the ability.

    Raises:
        AuthorizationError: If the user may not perform the ability
    """
    if not allows(ability, user, resource, resource_type):
        user_id = getattr(user, 'id', None)
        logger.warning(f'Denied {ability} for user {user_id} on {resource!r}')
        raise AuthorizationError(ability)
