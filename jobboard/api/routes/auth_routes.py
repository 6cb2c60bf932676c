"""
Authentication Routes

POST /auth/signup - Register new provider or seeker
POST /auth/login - Login and get JWT token
GET /auth/me - Get current user info
"""

from fastapi import APIRouter, HTTPException, Depends
from pymongo.errors import DuplicateKeyError

from jobboard.core.auth import hash_password, verify_password, create_user_token, get_current_user
from jobboard.services.mongo_service import UserService, serialize_user, to_object_id
from jobboard.schemas.schemas import (
    SignupRequest, LoginRequest, TokenResponse, UserResponse, MessageResponse
)

router = APIRouter(prefix="/auth", tags=["Authentication"])

EMAIL_TAKEN = "E-Mail address already exists!"


@router.post("/signup", response_model=MessageResponse, status_code=201)
async def signup(request: SignupRequest):
    """
    Register a new account as a job provider or a job seeker.

    After registration, login to get access token.
    """
    users = UserService()
    if users.get_by_email(request.email):
        raise HTTPException(status_code=409, detail=EMAIL_TAKEN)

    try:
        users.create(
            name=request.name,
            email=request.email,
            password_hash=hash_password(request.password),
            role=request.role.value,
        )
    except DuplicateKeyError:
        raise HTTPException(status_code=409, detail=EMAIL_TAKEN)

    return MessageResponse(message="Registered Successfully!")


@router.post("/login", response_model=TokenResponse)
async def login(request: LoginRequest):
    """
    Login and receive JWT access token.

    Include token in requests: Authorization: Bearer <token>
    """
    user = UserService().get_by_email(request.email)

    if not user:
        raise HTTPException(status_code=401, detail="Email does not exist")

    if not verify_password(request.password, user["password"]):
        raise HTTPException(status_code=401, detail="Incorrect Password")

    return TokenResponse(
        token=create_user_token(user),
        userId=str(user["_id"]),
        role=user["role"],
    )


@router.get("/me", response_model=UserResponse)
async def get_me(user: dict = Depends(get_current_user)):
    """Get current authenticated user's info."""
    doc = UserService().find_by_id(to_object_id(user["user_id"]))
    return UserResponse(**serialize_user(doc))
