"""
Credential store: registration, credential checks and password changes.

Uniqueness of usernames is left to the database's unique index, so two
concurrent registrations for one name end with exactly one
DuplicateUsername instead of two rows.
"""
import logging
from typing import Optional
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from app.core.errors import AuthFailure, DuplicateUsername, NotFound
from app.core.security import get_dummy_hash, hash_password_async, verify_password_async
from app.models.user import User

logger = logging.getLogger(__name__)


def get_user_by_username(db: Session, username: str) -> Optional[User]:
    return db.query(User).filter(User.username == username).first()


def get_user_by_id(db: Session, user_id: int) -> Optional[User]:
    return db.query(User).filter(User.id == user_id).first()


async def register_user(db: Session, username: str, password: str) -> User:
    """
    Create a user with a freshly hashed password.

    Args:
        db: Database session
        username: Validated username
        password: Raw password (never stored or logged)

    Returns:
        The new User

    Raises:
        DuplicateUsername: If the username is already taken
    """
    password_hash = await hash_password_async(password)
    user = User(username=username, password_hash=password_hash)
    db.add(user)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        raise DuplicateUsername()
    db.refresh(user)

    logger.info(f"Registered user {user.id} ({user.username})")
    return user


async def verify_credentials(db: Session, username: str, password: str) -> User:
    """
    Return the user whose password matches.

    Raises:
        AuthFailure: Unknown username or wrong password, indistinguishably
    """
    user = get_user_by_username(db, username)
    password_hash = user.password_hash if user else get_dummy_hash()
    if not await verify_password_async(password, password_hash) or not user:
        logger.info(f"Failed login for username '{username}'")
        raise AuthFailure()
    return user


async def change_password(
    db: Session,
    user_id: int,
    current_password: str,
    new_password: str
) -> None:
    """
    Replace a user's password hash after checking the current password.

    Raises:
        NotFound: If the user no longer exists
        AuthFailure: If ``current_password`` is wrong; the hash is left as is
    """
    user = get_user_by_id(db, user_id)
    if not user:
        raise NotFound("User not found")

    if not await verify_password_async(current_password, user.password_hash):
        raise AuthFailure("Current password is incorrect")

    user.password_hash = await hash_password_async(new_password)
    db.commit()
    logger.info(f"Password changed for user {user_id}")
