"""Auth service — JWT token management, password hashing, login and registration."""

from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext

from app.config import get_settings
from app.core.constants import ErrorMessages, Role
from app.core.exceptions import ConflictException, UnauthorizedException
from app.domain.models.user import User
from app.domain.repositories.user_repository import UserRepository

settings = get_settings()
pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.BCRYPT_ROUNDS,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError):
        return False


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES))
    to_encode.update({"iat": now, "exp": expire})
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.JWT_ALGORITHM)


def generate_token(user: User) -> str:
    """Signed token embedding the user's id, email, role and display name."""
    return create_access_token({
        "id": user.id,
        "email": user.email,
        "userType": user.user_type,
        "name": user.username,
    })


def decode_access_token(token: str) -> Optional[dict]:
    """Verified payload, or None on a bad signature, expiry or malformed token."""
    try:
        return jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def authenticate_user(repo: UserRepository, email: str, password: str) -> User:
    user = repo.get_by_email(email)
    if not user or not verify_password(password, user.password_hash):
        raise UnauthorizedException(ErrorMessages.INVALID_CREDENTIALS)
    return user


def register_user(
    repo: UserRepository,
    username: str,
    email: str,
    password: str,
    user_type: int = Role.PET_OWNER,
) -> User:
    if repo.get_by_email_or_username(email, username):
        raise ConflictException(ErrorMessages.USER_EXISTS)

    try:
        return repo.create({
            "username": username,
            "email": email,
            "password_hash": hash_password(password),
            "user_type": int(user_type),
        })
    except ConflictException:
        # Lost a race against a concurrent registration
        raise ConflictException(ErrorMessages.USER_EXISTS)


def ensure_default_admin(repo: UserRepository, username: str, email: str, password: str) -> Optional[User]:
    """Create the seed administrator unless an account with that email already exists."""
    if repo.get_by_email_or_username(email, username):
        return None
    return register_user(repo, username, email, password, Role.ADMIN)
