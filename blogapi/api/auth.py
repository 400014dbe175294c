"""인증 라우터 — 회원가입, 로그인, 토큰 갱신, 프로필 조회.

Auth Router — Registration, login, token refresh, and profile endpoints.
"""

from typing import Annotated

from fastapi import APIRouter, Depends, status
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.api.deps import get_current_user
from blogapi.database import get_db
from blogapi.schemas.auth import (
    AuthUser,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    RegisterResponse,
    TokenResponse,
    UserMeResponse,
)
from blogapi.services.auth_service import auth_service

router: APIRouter = APIRouter()


@router.post(
    "/register",
    response_model=RegisterResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"description": "잘못된 요청"}, 409: {"description": "중복된 이메일"}},
)
async def register(
    data: RegisterRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> RegisterResponse:
    """회원가입.

    Create a user account. Returns the new user id.
    """
    user_id: int = await auth_service.register(db, data)
    await db.commit()
    return RegisterResponse(id=user_id)


@router.post(
    "/login",
    response_model=TokenResponse,
    responses={400: {"description": "잘못된 요청"}, 401: {"description": "인증 실패"}},
)
async def login(
    data: LoginRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """로그인 — 액세스/리프레시 토큰 쌍 발급.

    Login endpoint. Issues an access/refresh token pair.
    """
    result: TokenResponse = await auth_service.login(db, data)
    await db.commit()
    return result


@router.post(
    "/refresh",
    response_model=TokenResponse,
    responses={400: {"description": "잘못된 요청"}, 401: {"description": "유효하지 않은 리프레시 토큰"}},
)
async def refresh_token(
    data: RefreshRequest,
    db: Annotated[AsyncSession, Depends(get_db)],
) -> TokenResponse:
    """토큰 갱신 — 리프레시 토큰으로 새 토큰 쌍 발급.

    Refresh token endpoint. Issues a new token pair and invalidates the one presented.
    """
    result: TokenResponse = await auth_service.refresh_tokens(db, data)
    await db.commit()
    return result


@router.get("/me", response_model=UserMeResponse)
async def get_me(
    db: Annotated[AsyncSession, Depends(get_db)],
    current_user: Annotated[AuthUser, Depends(get_current_user)],
) -> UserMeResponse:
    """현재 사용자 프로필 조회.

    Get the profile of the access token holder.
    """
    return await auth_service.get_me(db, current_user)
