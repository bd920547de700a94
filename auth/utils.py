from models.user import User
from models import utcnow
from pydantic import ValidationError
from repositories import statistic_repository, user_repository
from repositories.unit_of_work import unit_of_work
from services import log_service
from services.exceptions import DuplicateEmailError, InputValidationError
from services.input_models import CredentialsInput, RegistrationInput, validation_messages
import logging

logger = logging.getLogger(__name__)


def register_user(name, email, password):
    """
    Register a new user account.

    Args:
        name: Display name, underscores are turned into spaces
        email: Login email, stored lowercased
        password: Plain text password, only its hash is stored

    Returns:
        The committed User

    Raises:
        InputValidationError: If any field breaks the registration rules
        DuplicateEmailError: If the email already has an account
    """
    try:
        data = RegistrationInput(name=name, email=email, password=password)
    except ValidationError as e:
        raise InputValidationError(validation_messages(e))

    if user_repository.email_exists(data.email):
        raise DuplicateEmailError(f'The email {data.email} is already registered.')

    with unit_of_work():
        user = User(name=data.name, email=data.email, last_active_at=utcnow())
        user.set_password(data.password)
        user_repository.add(user)

        statistic_repository.get_or_create_for_user(user.id)
        log_service.log_user_registered(user)

    logger.info(f'Registered new user: {user.email}')
    return user


def verify_credentials(email, password):
    """
    Check login credentials without recording a login.

    Returns:
        User object when the password matches, None otherwise
    """
    try:
        credentials = CredentialsInput(email=email or '', password=password or '')
    except ValidationError:
        return None

    user = user_repository.get_by_email(credentials.email)
    if user is None or not user.check_password(credentials.password):
        logger.warning(f'Failed login attempt for {credentials.email}')
        return None

    return user


def authenticate(email, password):
    """Log a user in: verify the credentials, then record the login"""
    user = verify_credentials(email, password)
    if user is None:
        return None

    with unit_of_work():
        user.last_active_at = utcnow()
        log_service.log_user_login(user.id)

    return user


def get_user_by_email(email):
    return user_repository.get_by_email(email)


def get_user_by_id(user_id):
    return user_repository.get_by_id(user_id)


def record_exit(user_id):
    """Record that a user left the interactive application"""
    with unit_of_work():
        log_service.log_user_exit(user_id)
