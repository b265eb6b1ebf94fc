from fastapi import APIRouter, Depends, HTTPException, status
from jose import JWTError
from sqlalchemy import select, or_
from sqlalchemy.ext.asyncio import AsyncSession

from journalmate.models.user import User
from journalmate.schemas.user import UserCreate, UserUpdate, UserResponse, Token
from journalmate.schemas.auth import LoginRequest, RefreshRequest, AccessTokenResponse, ChangePasswordRequest
from journalmate.database import get_db
from journalmate.utils.password import hash_password, verify_password
from journalmate.utils.timeutils import is_valid_timezone
from journalmate.core.security import create_access_token, create_refresh_token, decode_token
from journalmate.core.auth import get_current_user


router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/register", response_model=UserResponse, status_code=201)
async def register(user_in: UserCreate, db: AsyncSession = Depends(get_db)):
    result = await db.execute(select(User).where(User.username == user_in.username))
    if result.scalar_one_or_none():
        raise HTTPException(status_code=409, detail="Username already taken")

    if user_in.email:
        result = await db.execute(select(User).where(User.email == user_in.email))
        if result.scalar_one_or_none():
            raise HTTPException(status_code=409, detail="Email already registered")

    try:
        hashed_pw = hash_password(user_in.password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    user = User(
        username=user_in.username,
        email=user_in.email,
        first_name=user_in.first_name,
        last_name=user_in.last_name,
        hashed_password=hashed_pw,
    )
    db.add(user)
    await db.commit()
    await db.refresh(user)
    return user


@router.post("/login", response_model=Token)
async def login(login_in: LoginRequest, db: AsyncSession = Depends(get_db)):
    # Either the username or the email works as a login name
    result = await db.execute(
        select(User).where(or_(User.username == login_in.username, User.email == login_in.username))
    )
    user = result.scalars().first()

    if not user or not verify_password(login_in.password, user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )

    access_token = create_access_token({"sub": user.id})
    refresh_token = create_refresh_token({"sub": user.id})

    return Token(
        access_token=access_token,
        refresh_token=refresh_token,
        token_type="bearer",
        user=user
    )


@router.post("/refresh", response_model=AccessTokenResponse)
async def refresh(request: RefreshRequest, db: AsyncSession = Depends(get_db)):
    invalid = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Invalid refresh token",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = decode_token(request.refresh_token)
    except JWTError:
        raise invalid
    if payload.get("type") != "refresh" or not payload.get("sub"):
        raise invalid

    result = await db.execute(select(User).where(User.id == payload["sub"]))
    if not result.scalar_one_or_none():
        raise invalid

    return AccessTokenResponse(access_token=create_access_token({"sub": payload["sub"]}))


@router.get("/me", response_model=UserResponse)
async def read_users_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.patch("/me", response_model=UserResponse)
async def update_users_me(
    user_in: UserUpdate,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    data = user_in.model_dump(exclude_unset=True)

    if data.get("email") and data["email"] != current_user.email:
        result = await db.execute(select(User).where(User.email == data["email"]))
        if result.scalar_one_or_none():
            raise HTTPException(status_code=409, detail="Email already registered")

    if data.get("timezone") and not is_valid_timezone(data["timezone"]):
        raise HTTPException(status_code=400, detail="Unknown timezone")

    for field, value in data.items():
        setattr(current_user, field, value)

    db.add(current_user)
    await db.commit()
    await db.refresh(current_user)
    return current_user


@router.post("/change-password")
async def change_password(
    request: ChangePasswordRequest,
    db: AsyncSession = Depends(get_db),
    current_user: User = Depends(get_current_user)
):
    if not verify_password(request.current_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Current password is incorrect"
        )

    # Prevent reusing same password
    if verify_password(request.new_password, current_user.hashed_password):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="New password must be different"
        )

    try:
        hashed_new = hash_password(request.new_password)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    current_user.hashed_password = hashed_new
    db.add(current_user)
    await db.commit()

    return {"message": "Password updated successfully"}
