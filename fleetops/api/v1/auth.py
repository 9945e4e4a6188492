from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, update
from datetime import datetime, timezone
from fleetops.database import get_db
from fleetops.models.user import User, UserStatus, ApiToken, TokenType
from fleetops.schemas.auth import (
    UserCreate,
    UserLogin,
    TokenResponse,
    UserResponse,
    RefreshTokenRequest,
    ChangePasswordRequest,
)
from fleetops.middleware.auth import get_current_user, get_current_token
from fleetops.core.security import (
    verify_password,
    get_password_hash,
    create_access_token,
    create_refresh_token,
    decode_token,
    hash_token,
)
import logging

logger = logging.getLogger(__name__)

router = APIRouter()


async def issue_tokens(db: AsyncSession, user: User) -> tuple[str, str]:
    """Create an access/refresh pair and record both so sign-out can revoke them"""
    access_token, access_expires = create_access_token(data={"sub": user.id})
    refresh_token, refresh_expires = create_refresh_token(data={"sub": user.id})

    db.add_all([
        ApiToken(
            user_id=user.id,
            token_hash=hash_token(access_token),
            token_type=TokenType.ACCESS,
            expires_at=access_expires,
        ),
        ApiToken(
            user_id=user.id,
            token_hash=hash_token(refresh_token),
            token_type=TokenType.REFRESH,
            expires_at=refresh_expires,
        ),
    ])
    await db.commit()
    return access_token, refresh_token


@router.post("/register", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
async def register(
    user_data: UserCreate,
    db: AsyncSession = Depends(get_db)
):
    """Register a new fleet operator account"""
    result = await db.execute(
        select(User).where(User.email == user_data.email)
    )
    existing_user = result.scalar_one_or_none()

    if existing_user:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered"
        )

    new_user = User(
        email=user_data.email,
        password_hash=get_password_hash(user_data.password),
        full_name=user_data.full_name or "",
        phone=user_data.phone,
        company_name=user_data.company_name,
        status=UserStatus.ACTIVE,
    )

    db.add(new_user)
    await db.commit()
    await db.refresh(new_user)

    logger.info(f"Registered user {new_user.id}")
    return new_user


@router.post("/login", response_model=TokenResponse)
async def login(
    credentials: UserLogin,
    db: AsyncSession = Depends(get_db)
):
    """Sign in and get access/refresh tokens"""
    result = await db.execute(
        select(User).where(User.email == credentials.email)
    )
    user = result.scalar_one_or_none()

    if not user or not verify_password(credentials.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password"
        )

    if user.status != UserStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    access_token, refresh_token = await issue_tokens(db, user)

    return TokenResponse(
        access_token=access_token,
        refresh_token=refresh_token,
        user=UserResponse.model_validate(user)
    )


@router.post("/refresh", response_model=TokenResponse)
async def refresh_token(
    refresh_token_data: RefreshTokenRequest,
    db: AsyncSession = Depends(get_db)
):
    """Exchange a refresh token for a new token pair"""
    invalid_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid refresh token"
    )

    payload = decode_token(refresh_token_data.refresh_token)
    if not payload or payload.get("type") != TokenType.REFRESH.value or not payload.get("sub"):
        raise invalid_exception

    result = await db.execute(
        select(ApiToken).where(ApiToken.token_hash == hash_token(refresh_token_data.refresh_token))
    )
    stored = result.scalar_one_or_none()
    if stored is None or stored.revoked_at is not None:
        raise invalid_exception

    result = await db.execute(select(User).where(User.id == payload["sub"]))
    user = result.scalar_one_or_none()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="User not found"
        )

    if user.status != UserStatus.ACTIVE:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Account is inactive"
        )

    # Refresh tokens are single use
    stored.revoked_at = datetime.now(timezone.utc)
    access_token, new_refresh_token = await issue_tokens(db, user)

    return TokenResponse(
        access_token=access_token,
        refresh_token=new_refresh_token
    )


@router.post("/logout")
async def logout(
    token: ApiToken = Depends(get_current_token),
    db: AsyncSession = Depends(get_db)
):
    """Sign out: revoke every outstanding token of the current user"""
    await db.execute(
        update(ApiToken)
        .where(ApiToken.user_id == token.user_id, ApiToken.revoked_at.is_(None))
        .values(revoked_at=datetime.now(timezone.utc))
    )
    await db.commit()

    logger.info(f"User {token.user_id} signed out")
    return {"message": "Signed out successfully"}


@router.get("/me", response_model=UserResponse)
async def read_current_user(
    current_user: User = Depends(get_current_user)
):
    """Current signed-in user"""
    return current_user


@router.put("/change-password", status_code=status.HTTP_200_OK)
async def change_password(
    password_data: ChangePasswordRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db)
):
    """Change user password"""
    if not verify_password(password_data.current_password, current_user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Current password is incorrect"
        )

    if len(password_data.new_password) < 6:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="New password must be at least 6 characters long"
        )

    current_user.password_hash = get_password_hash(password_data.new_password)
    await db.commit()

    return {"message": "Password changed successfully"}
