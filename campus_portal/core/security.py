"""Security utilities for authentication and authorization."""

from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Optional

from jose import JWTError, jwt
from passlib.context import CryptContext
from pydantic import BaseModel

from campus_portal.core.settings import settings
from campus_portal.services.seed import DEFAULT_USERS

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# JWT configuration
ALGORITHM = "HS256"


class UserRole(str, Enum):
    """Portal roles."""

    ADMIN = "admin"
    FACULTY = "faculty"
    STUDENT = "student"


class Token(BaseModel):
    """Token response model."""

    access_token: str
    token_type: str


class TokenData(BaseModel):
    """Token data model."""

    username: Optional[str] = None


class User(BaseModel):
    """User model for authentication."""

    username: str
    full_name: Optional[str] = None
    role: UserRole
    student_id: Optional[int] = None
    disabled: Optional[bool] = None

    @property
    def is_staff(self) -> bool:
        return self.role in (UserRole.ADMIN, UserRole.FACULTY)


class UserInDB(User):
    """User in database model."""

    hashed_password: str


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    """Get password hash."""
    return pwd_context.hash(password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create access token."""
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(
            minutes=settings.access_token_expire_minutes
        )
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.secret_key, algorithm=ALGORITHM)
    return encoded_jwt


def verify_token(token: str) -> Optional[TokenData]:
    """Verify access token."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[ALGORITHM])
        username: str = payload.get("sub")
        if username is None:
            return None
        token_data = TokenData(username=username)
        return token_data
    except JWTError:
        return None


def _sample_password(role: str) -> str:
    return {
        UserRole.ADMIN.value: settings.admin_password,
        UserRole.FACULTY.value: settings.faculty_password,
        UserRole.STUDENT.value: settings.student_password,
    }[role]


def _sample_username(role: str) -> str:
    return {
        UserRole.ADMIN.value: settings.admin_username,
        UserRole.FACULTY.value: settings.faculty_username,
        UserRole.STUDENT.value: settings.student_username,
    }[role]


# Sample accounts, one per role (replace with a real user store later)
fake_users_db = {
    _sample_username(user["role"]): {
        "username": _sample_username(user["role"]),
        "full_name": user["full_name"],
        "role": user["role"],
        "student_id": user.get("student_id"),
        "hashed_password": get_password_hash(_sample_password(user["role"])),
        "disabled": False,
    }
    for user in DEFAULT_USERS
}


def get_user(username: str) -> Optional[UserInDB]:
    """Get user from database."""
    if username in fake_users_db:
        user_dict = fake_users_db[username]
        return UserInDB(**user_dict)
    return None


def authenticate_user(username: str, password: str) -> Optional[UserInDB]:
    """Authenticate user."""
    user = get_user(username)
    if not user:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user
