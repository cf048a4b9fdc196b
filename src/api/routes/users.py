"""User directory routes.

Endpoints (all except /authenticate need the X-Acting-User-Login header):
- POST /api/users: Create user (admin)
- PUT /api/users/{login}/personal-info: Update name, gender, birthday
- PUT /api/users/{login}/password: Update password
- PUT /api/users/{login}/login: Rename user
- GET /api/users/active: List active users (admin)
- GET /api/users/older-than/{age}: List users at least `age` years old (admin)
- GET /api/users/{login}: Brief user view (admin)
- POST /api/users/authenticate: Fetch own profile with login + password
- DELETE /api/users/{login}: Soft or hard delete (admin)
- POST /api/users/{login}/restore: Undo a soft delete (admin)
"""

import logging
import os

from fastapi import APIRouter, Depends, status

from api.dependencies import get_password_hasher, get_user_repo
from api.models import (
    AuthenticateRequest,
    CreateUserRequest,
    PersonalInfoRequest,
    ProblemResponse,
    UpdateLoginRequest,
    UpdatePasswordRequest,
    UserBriefResponse,
    UserResponse,
)
from api.results import to_response
from api.security import get_actor_login_required
from domain.model.result import ResultKind, failure
from port.password_hasher import PasswordHasher
from port.user_repository import UserRepository
from services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/users", tags=["users"])
# Plain def handlers: pymongo and bcrypt block, so FastAPI runs them in its threadpool

# When false, /authenticate answers "unknown user" and "wrong password" identically
AUTH_DISCLOSE_NOT_FOUND = os.getenv("AUTH_DISCLOSE_NOT_FOUND", "false").lower() == "true"

_PROBLEMS = {
    code: {"model": ProblemResponse}
    for code in (
        status.HTTP_400_BAD_REQUEST,
        status.HTTP_401_UNAUTHORIZED,
        status.HTTP_403_FORBIDDEN,
        status.HTTP_404_NOT_FOUND,
        status.HTTP_409_CONFLICT,
    )
}


def _render_user(user) -> UserResponse:
    return UserResponse.from_domain(user)


def _render_users(users) -> list[UserResponse]:
    return [UserResponse.from_domain(u) for u in users]


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED, responses=_PROBLEMS)
def create_user(
    request: CreateUserRequest,
    actor_login: str = Depends(get_actor_login_required),
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Create a user. Only administrators may create users."""
    logger.info("Create user requested", extra={"actorLogin": actor_login, "targetLogin": request.login})
    result = user_service.create_user(
        repo,
        hasher,
        actor_login,
        login=request.login,
        password=request.password,
        name=request.name,
        gender=request.gender,
        birthday=request.birthday,
        is_admin=request.is_admin,
    )
    return to_response(result, _render_user)


@router.put("/{login}/personal-info", response_model=UserResponse, responses=_PROBLEMS)
def update_personal_info(
    login: str,
    request: PersonalInfoRequest,
    actor_login: str = Depends(get_actor_login_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Update name, gender and birthday. Admins, or the user themself while active."""
    logger.info("Personal info update requested", extra={"actorLogin": actor_login, "targetLogin": login})
    result = user_service.update_personal_info(
        repo,
        actor_login,
        login,
        name=request.name,
        gender=request.gender,
        birthday=request.birthday,
    )
    return to_response(result, _render_user)


@router.put("/{login}/password", status_code=status.HTTP_204_NO_CONTENT, responses=_PROBLEMS)
def update_password(
    login: str,
    request: UpdatePasswordRequest,
    actor_login: str = Depends(get_actor_login_required),
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Set a new password. Admins, or the user themself while active."""
    logger.info("Password update requested", extra={"actorLogin": actor_login, "targetLogin": login})
    result = user_service.update_password(repo, hasher, actor_login, login, new_password=request.new_password)
    return to_response(result)


@router.put("/{login}/login", response_model=UserResponse, responses=_PROBLEMS)
def update_login(
    login: str,
    request: UpdateLoginRequest,
    actor_login: str = Depends(get_actor_login_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Rename a user. The new login must not belong to anyone else."""
    logger.info("Login change requested", extra={
        "actorLogin": actor_login,
        "targetLogin": login,
        "newLogin": request.new_login,
    })
    result = user_service.update_login(repo, actor_login, login, new_login=request.new_login)
    return to_response(result, _render_user)


@router.get("/active", response_model=list[UserResponse], responses=_PROBLEMS)
def list_active_users(
    actor_login: str = Depends(get_actor_login_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """List users that are not revoked, oldest first."""
    result = user_service.list_active_users(repo, actor_login)
    return to_response(result, _render_users)


@router.get("/older-than/{age}", response_model=list[UserResponse], responses=_PROBLEMS)
def list_users_older_than(
    age: int,
    actor_login: str = Depends(get_actor_login_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """List users born at least `age` years ago, ordered by birthday."""
    logger.info("Age query requested", extra={"actorLogin": actor_login, "age": age})
    result = user_service.list_users_older_than(repo, actor_login, age)
    return to_response(result, _render_users)


@router.post("/authenticate", response_model=UserResponse, responses=_PROBLEMS)
def authenticate(
    request: AuthenticateRequest,
    repo: UserRepository = Depends(get_user_repo),
    hasher: PasswordHasher = Depends(get_password_hasher),
):
    """Return the caller's own profile given valid credentials of an active user."""
    logger.info("Self-authentication requested", extra={"targetLogin": request.login})
    result = user_service.authenticate_self(repo, hasher, request.login, request.password)

    if not result.ok and not AUTH_DISCLOSE_NOT_FOUND:
        # Don't reveal whether the login exists
        result = failure("Invalid login or password", ResultKind.INVALID_CREDENTIALS)

    return to_response(result, _render_user)


@router.get("/{login}", response_model=UserBriefResponse, responses=_PROBLEMS)
def get_user_brief(
    login: str,
    actor_login: str = Depends(get_actor_login_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Brief view of a user: name, gender, birthday and active flag."""
    result = user_service.get_user_brief(repo, actor_login, login)
    return to_response(result, UserBriefResponse.from_domain)


@router.delete("/{login}", responses={**_PROBLEMS, status.HTTP_200_OK: {"model": UserResponse}})
def delete_user(
    login: str,
    hard_delete: bool = False,
    actor_login: str = Depends(get_actor_login_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Soft delete (200 with the revoked user) or, with hard_delete=true, remove permanently (204)."""
    logger.info("Delete requested", extra={
        "actorLogin": actor_login,
        "targetLogin": login,
        "hardDelete": hard_delete,
    })
    result = user_service.delete_user(repo, actor_login, login, hard_delete=hard_delete)
    return to_response(result, _render_user)


@router.post("/{login}/restore", response_model=UserResponse, responses=_PROBLEMS)
def restore_user(
    login: str,
    actor_login: str = Depends(get_actor_login_required),
    repo: UserRepository = Depends(get_user_repo),
):
    """Clear a soft delete. Restoring an active user is a no-op."""
    logger.info("Restore requested", extra={"actorLogin": actor_login, "targetLogin": login})
    result = user_service.restore_user(repo, actor_login, login)
    return to_response(result, _render_user)
