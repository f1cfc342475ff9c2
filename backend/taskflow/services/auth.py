import logging
from typing import Optional, Tuple

from sqlalchemy.ext.asyncio import AsyncSession

from taskflow.core.errors import AuthenticationError, AuthorizationError, ValidationError
from taskflow.core.security import create_access_token, decode_access_token, get_password_hash, verify_password
from taskflow.models.user import User
from taskflow.schemas.user import UserRole
from taskflow.services import policy
from taskflow.stores import user_store

logger = logging.getLogger(__name__)


def issue_token(user: User) -> str:
    return create_access_token(data={"id": user.id, "email": user.email, "role": user.role})


async def login(db: AsyncSession, email: Optional[str], password: Optional[str]) -> Tuple[str, User]:
    if not email or not password:
        raise ValidationError("Email and password required")

    user = await user_store.find_by_email(db, email)
    if user is None or not verify_password(password, user.hashed_password):
        logger.info("Failed login for %s", email)
        raise AuthenticationError("Invalid credentials")

    return issue_token(user), user


async def authenticate(db: AsyncSession, token: Optional[str]) -> User:
    if not token:
        raise AuthenticationError("Access token required")
    claims = decode_access_token(token)
    user = await user_store.find_by_id(db, claims["id"])
    if user is None:
        logger.debug("Token for unknown user id=%s", claims["id"])
        raise AuthenticationError("Invalid or expired token")
    return user


async def register_user(
    db: AsyncSession,
    requester: User,
    *,
    email: Optional[str],
    password: Optional[str],
    name: Optional[str],
    role: Optional[str],
) -> User:
    if not policy.can_register_user(requester.role):
        raise AuthorizationError("Admin access required")
    if not email or not password or not name or not role:
        raise ValidationError("All fields required")
    try:
        role = UserRole(role)
    except ValueError:
        raise ValidationError("Role must be admin or worker") from None

    user = await user_store.insert_user(
        db,
        email=email,
        hashed_password=get_password_hash(password),
        name=name,
        role=role.value,
    )
    logger.info("User %s (%s) registered by %s", user.id, user.role, requester.id)
    return user
