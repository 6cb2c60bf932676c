"""
Authentication Utility - JWT and Password handling.

Provides:
- Password hashing with bcrypt
- JWT token creation/verification (secret comes from settings / environment)
- FastAPI dependencies for protected routes, one per role
"""

from datetime import datetime, timedelta
from typing import Optional
from jose import JWTError, jwt
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from jobboard.core.config import get_settings
from jobboard.schemas.schemas import UserRole
from jobboard.services.mongo_service import UserService, to_object_id

settings = get_settings()

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Bearer token extractor
bearer_scheme = HTTPBearer()


def hash_password(password: str) -> str:
    """Hash password with bcrypt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify password against hash."""
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token."""
    to_encode = data.copy()
    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.jwt_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.jwt_algorithm)


def decode_token(token: str) -> Optional[dict]:
    """Decode and verify JWT token."""
    try:
        return jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.jwt_algorithm])
    except JWTError:
        return None


def create_user_token(user: dict) -> str:
    """Token for a stored user document."""
    return create_access_token(data={
        "sub": str(user["_id"]),
        "name": user["name"],
        "role": user["role"],
    })


async def get_current_user(credentials: HTTPAuthorizationCredentials = Depends(bearer_scheme)) -> dict:
    """
    FastAPI dependency - Get current authenticated user.

    Usage:
        @router.get("/protected")
        async def route(user: dict = Depends(get_current_user)):
            return user
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )

    payload = decode_token(credentials.credentials)
    if not payload:
        raise credentials_exception

    user_id = to_object_id(payload.get("sub"))
    if not user_id:
        raise credentials_exception

    # Verify user still exists (deleted users keep unexpired tokens)
    user = UserService().find_by_id(user_id)
    if not user:
        raise credentials_exception

    return {
        "user_id": str(user["_id"]),
        "name": user["name"],
        "email": user["email"],
        "role": user["role"],
    }


def _require_role(user: dict, role: UserRole, detail: str) -> dict:
    if user["role"] != role.value:
        raise HTTPException(status_code=403, detail=detail)
    return user


async def get_current_admin(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require Admin role."""
    return _require_role(user, UserRole.admin, "Admins only")


async def get_current_provider(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require Job Provider role."""
    return _require_role(user, UserRole.provider, "Job providers only")


async def get_current_seeker(user: dict = Depends(get_current_user)) -> dict:
    """Dependency - Require User (job seeker) role."""
    return _require_role(user, UserRole.seeker, "Job seekers only")
