"""Startup provisioning of the default administrator."""

import logging

from domain.model.errors import DuplicateError
from domain.model.user import SYSTEM_ACTOR, Gender, User
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

DEFAULT_ADMIN_LOGIN = 'admin'
DEFAULT_ADMIN_PASSWORD = 'admin123'
DEFAULT_ADMIN_NAME = 'DefaultAdmin'


def ensure_default_admin(
    repo: UserRepository,
    hasher: PasswordHasher,
    login: str = DEFAULT_ADMIN_LOGIN,
    password: str = DEFAULT_ADMIN_PASSWORD,
    name: str = DEFAULT_ADMIN_NAME,
) -> bool:
    """Create the admin account unless a user with that login already exists.

    The record is attributed to SYSTEM_ACTOR. Returns True if a user was created.
    """
    if repo.exists_by_login(login):
        logger.info("Initial admin user already exists", extra={"adminLogin": login})
        return False

    admin = User.create(
        login=login,
        password_hash=hasher.hash(password),
        name=name,
        gender=Gender.UNKNOWN,
        is_admin=True,
        created_by=SYSTEM_ACTOR,
    )
    try:
        repo.insert(admin)
    except DuplicateError:
        # Another instance bootstrapped first
        logger.info("Initial admin user created concurrently", extra={"adminLogin": login})
        return False

    logger.info("Initial admin user created", extra={"adminLogin": login})
    return True
