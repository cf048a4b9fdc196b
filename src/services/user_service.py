"""User service: authorization and lifecycle rules for directory users.

Pure business logic with no HTTP dependencies.
Every operation resolves the acting user, checks permission and target state,
applies the audit stamps and returns a ServiceResult. Expected failures are
results, never exceptions; store faults propagate to the caller.
"""

import calendar
import logging
from datetime import date, datetime, timezone

from domain.model.errors import DuplicateError, NotFoundError
from domain.model.result import ResultKind, ServiceResult, failure, success
from domain.model.user import Gender, User
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository

logger = logging.getLogger(__name__)

ACTOR_NOT_RESOLVED = "Acting user not found or not active"


# ── actor resolution & permissions ───────────────────────


def resolve_actor(repo: UserRepository, actor_login: str | None) -> User | None:
    """Return the acting user, or None if the login is blank, unknown or revoked."""
    if not actor_login or not actor_login.strip():
        return None

    actor = repo.get_by_login(actor_login)
    if actor is None or not actor.is_active:
        return None
    return actor


def can_modify(actor: User, target: User) -> bool:
    """Admins may change anyone; a user may change only their own active record."""
    return actor.is_admin or (actor.login == target.login and target.is_active)


def _require_admin(repo: UserRepository, actor_login: str | None, action: str) -> User | ServiceResult:
    actor = resolve_actor(repo, actor_login)
    if actor is None:
        return failure(ACTOR_NOT_RESOLVED, ResultKind.UNAUTHENTICATED)
    if not actor.is_admin:
        logger.info("Admin-only action refused", extra={"actorLogin": actor.login, "action": action})
        return failure(f"Only an administrator can {action}", ResultKind.FORBIDDEN)
    return actor


def _load_modifiable(
    repo: UserRepository,
    actor_login: str | None,
    target_login: str,
    what: str,
) -> tuple[User, User] | ServiceResult:
    """Shared prelude of the three update operations: actor, target, can_modify."""
    actor = resolve_actor(repo, actor_login)
    if actor is None:
        return failure(ACTOR_NOT_RESOLVED, ResultKind.UNAUTHENTICATED)

    target = repo.get_by_login(target_login)
    if target is None:
        return failure(f"User '{target_login}' not found", ResultKind.NOT_FOUND)

    if not can_modify(actor, target):
        if actor.login == target.login:
            message = f"An inactive user cannot change their own {what}"
        else:
            message = f"Not allowed to change the {what} of user '{target_login}'"
        return failure(message, ResultKind.FORBIDDEN)

    return actor, target


def _save(repo: UserRepository, user: User, target_login: str) -> ServiceResult | None:
    """Persist a mutated user; map store constraint errors to failures."""
    try:
        repo.update(user)
    except DuplicateError:
        return failure(f"Login '{user.login}' is already taken", ResultKind.CONFLICT)
    except NotFoundError:
        return failure(f"User '{target_login}' not found", ResultKind.NOT_FOUND)
    return None


def _subtract_years(day: date, years: int) -> date:
    """Shift a date back by whole years; Feb 29 falls back to Feb 28.

    The caller keeps the result within date.min.year.
    """
    if day.month == 2 and day.day == 29 and not calendar.isleap(day.year - years):
        return day.replace(year=day.year - years, day=28)
    return day.replace(year=day.year - years)


# ── create ───────────────────────────────────────────────


def create_user(
    repo: UserRepository,
    hasher: PasswordHasher,
    actor_login: str | None,
    login: str,
    password: str,
    name: str,
    gender: Gender,
    birthday: date | None = None,
    is_admin: bool = False,
) -> ServiceResult:
    """Create a new user on behalf of an admin.

    Returns CREATED with the new User, or FORBIDDEN / UNAUTHENTICATED / CONFLICT.
    """
    actor = _require_admin(repo, actor_login, "create users")
    if not isinstance(actor, User):
        return actor

    if repo.exists_by_login(login):
        return failure(f"User with login '{login}' already exists", ResultKind.CONFLICT)

    user = User.create(
        login=login,
        password_hash=hasher.hash(password),
        name=name,
        gender=gender,
        birthday=birthday,
        is_admin=is_admin,
        created_by=actor.login,
    )

    try:
        repo.insert(user)
    except DuplicateError:
        return failure(f"User with login '{login}' already exists", ResultKind.CONFLICT)

    logger.info("User created", extra={"targetLogin": user.login, "actorLogin": actor.login, "isAdmin": is_admin})
    return success(user, ResultKind.CREATED)


# ── updates ──────────────────────────────────────────────


def update_personal_info(
    repo: UserRepository,
    actor_login: str | None,
    target_login: str,
    name: str,
    gender: Gender,
    birthday: date | None = None,
) -> ServiceResult:
    loaded = _load_modifiable(repo, actor_login, target_login, "personal info")
    if not isinstance(loaded, tuple):
        return loaded
    actor, target = loaded

    target.update_personal_info(name=name, gender=gender, birthday=birthday, actor_login=actor.login)
    if rejected := _save(repo, target, target_login):
        return rejected

    logger.info("User personal info updated", extra={"targetLogin": target.login, "actorLogin": actor.login})
    return success(target)


def update_password(
    repo: UserRepository,
    hasher: PasswordHasher,
    actor_login: str | None,
    target_login: str,
    new_password: str,
) -> ServiceResult:
    loaded = _load_modifiable(repo, actor_login, target_login, "password")
    if not isinstance(loaded, tuple):
        return loaded
    actor, target = loaded

    target.change_password(hasher.hash(new_password), actor_login=actor.login)
    if rejected := _save(repo, target, target_login):
        return rejected

    logger.info("User password updated", extra={"targetLogin": target.login, "actorLogin": actor.login})
    return success(kind=ResultKind.SUCCESS_NO_DATA)


def update_login(
    repo: UserRepository,
    actor_login: str | None,
    target_login: str,
    new_login: str,
) -> ServiceResult:
    """Rename a user. The new login must be free unless it equals the current one."""
    loaded = _load_modifiable(repo, actor_login, target_login, "login")
    if not isinstance(loaded, tuple):
        return loaded
    actor, target = loaded

    if target.login != new_login and repo.exists_by_login(new_login):
        return failure(f"Login '{new_login}' is already taken", ResultKind.CONFLICT)

    target.change_login(new_login, actor_login=actor.login)
    if rejected := _save(repo, target, target_login):
        return rejected

    logger.info("User login changed", extra={
        "oldLogin": target_login,
        "targetLogin": new_login,
        "actorLogin": actor.login,
    })
    return success(target)


# ── queries ──────────────────────────────────────────────


def list_active_users(repo: UserRepository, actor_login: str | None) -> ServiceResult:
    """All users without a revocation, oldest first."""
    actor = _require_admin(repo, actor_login, "list active users")
    if not isinstance(actor, User):
        return actor

    return success(repo.find_many(active_only=True, order_by='created_on'))


def get_user_brief(repo: UserRepository, actor_login: str | None, target_login: str) -> ServiceResult:
    actor = _require_admin(repo, actor_login, "look up users by login")
    if not isinstance(actor, User):
        return actor

    user = repo.get_by_login(target_login)
    if user is None:
        return failure(f"User '{target_login}' not found", ResultKind.NOT_FOUND)
    return success(user.to_brief())


def authenticate_self(
    repo: UserRepository,
    hasher: PasswordHasher,
    login: str,
    password: str,
) -> ServiceResult:
    """Return the full profile of an active user whose password verifies.

    Unknown or revoked logins yield NOT_FOUND; a wrong password yields
    INVALID_CREDENTIALS. The transport decides whether to expose the difference.
    """
    user = repo.get_by_login(login)
    if user is None or not user.is_active:
        return failure("User not found or not active", ResultKind.NOT_FOUND)

    if not hasher.verify(password, user.password_hash):
        logger.info("Self-authentication failed", extra={"targetLogin": login})
        return failure("Invalid login or password", ResultKind.INVALID_CREDENTIALS)

    return success(user)


def list_users_older_than(
    repo: UserRepository,
    actor_login: str | None,
    age: int,
    today: date | None = None,
) -> ServiceResult:
    """Users born on or before today minus `age` years, ordered by birthday.

    Users without a birthday are excluded. `today` defaults to the current UTC date.
    """
    actor = _require_admin(repo, actor_login, "list users by age")
    if not isinstance(actor, User):
        return actor

    if age < 0:
        return failure("Age cannot be negative", ResultKind.VALIDATION_FAILURE)

    if today is None:
        today = datetime.now(timezone.utc).date()
    if today.year - age < date.min.year:
        # Nobody can be born before year 1
        return success([])
    cutoff = _subtract_years(today, age)

    return success(repo.find_many(born_on_or_before=cutoff, order_by='birthday'))


# ── delete & restore ─────────────────────────────────────


def delete_user(
    repo: UserRepository,
    actor_login: str | None,
    target_login: str,
    hard_delete: bool = False,
) -> ServiceResult:
    """Revoke (soft) or remove (hard) a user.

    Soft delete returns the user's current state and is a no-op for an already
    revoked user. Hard delete returns SUCCESS_NO_DATA.
    """
    actor = _require_admin(repo, actor_login, "delete users")
    if not isinstance(actor, User):
        return actor

    if actor.login == target_login:
        return failure("An administrator cannot delete themselves", ResultKind.FORBIDDEN)

    target = repo.get_by_login(target_login)
    if target is None:
        return failure(f"User '{target_login}' not found", ResultKind.NOT_FOUND)

    if hard_delete:
        try:
            repo.delete(target)
        except NotFoundError:
            return failure(f"User '{target_login}' not found", ResultKind.NOT_FOUND)
        logger.info("User hard deleted", extra={"targetLogin": target_login, "actorLogin": actor.login})
        return success(kind=ResultKind.SUCCESS_NO_DATA)

    if not target.is_active:
        logger.info("User already revoked, nothing to do", extra={"targetLogin": target_login, "actorLogin": actor.login})
        return success(target)

    target.revoke(actor.login)
    if rejected := _save(repo, target, target_login):
        return rejected

    logger.info("User soft deleted", extra={"targetLogin": target_login, "actorLogin": actor.login})
    return success(target)


def restore_user(repo: UserRepository, actor_login: str | None, target_login: str) -> ServiceResult:
    actor = _require_admin(repo, actor_login, "restore users")
    if not isinstance(actor, User):
        return actor

    target = repo.get_by_login(target_login)
    if target is None:
        return failure(f"User '{target_login}' not found", ResultKind.NOT_FOUND)

    if target.is_active:
        logger.info("User already active, nothing to restore", extra={"targetLogin": target_login, "actorLogin": actor.login})
        return success(target)

    target.restore(actor.login)
    if rejected := _save(repo, target, target_login):
        return rejected

    logger.info("User restored", extra={"targetLogin": target_login, "actorLogin": actor.login})
    return success(target)
