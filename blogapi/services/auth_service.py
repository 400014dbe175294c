"""인증 서비스 — 회원가입, 로그인, 토큰 갱신 비즈니스 로직.

Auth Service — Business logic for registration, login, and token refresh.

Refresh token lifecycle:
    Issued   → 서명 완료, 다이제스트 저장 (signed, digest stored)
    Consumed → 한 번 갱신에 사용됨, 저장소에는 새 다이제스트 (used once, store now holds a new digest)
    Invalid  → 만료, 위조, 유형 불일치, 사용자 없음, 다이제스트 불일치
               (expired, tampered, wrong class, unknown user, digest mismatch)

Rotation is revocation: exchanging a refresh token replaces its digest, so a
replayed token always fails the digest check.
"""

import logging
from typing import Any

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.models.user import User
from blogapi.repositories.user_repository import (
    UserRepository,
    is_unique_violation,
    user_repository,
)
from blogapi.schemas.auth import (
    AuthUser,
    LoginRequest,
    RefreshRequest,
    RegisterRequest,
    TokenResponse,
    UserMeResponse,
)
from blogapi.services.credential_verifier import CredentialVerifier, credential_verifier
from blogapi.services.refresh_token_store import RefreshTokenStore, refresh_token_store
from blogapi.utils.exceptions import (
    DuplicateEmailError,
    InvalidRefreshTokenError,
    UnauthorizedError,
)
from blogapi.utils.jwt import (
    REFRESH_TOKEN_TYPE,
    InvalidToken,
    create_access_token,
    create_refresh_token,
    decode_refresh_token,
)
from blogapi.utils.password import hash_password

logger = logging.getLogger(__name__)


class AuthService:
    """인증 관련 비즈니스 로직을 처리하는 서비스.

    Service handling authentication business logic.
    Collaborators are passed in so tests can swap any of them.
    """

    def __init__(
        self,
        users: UserRepository = user_repository,
        verifier: CredentialVerifier = credential_verifier,
        token_store: RefreshTokenStore = refresh_token_store,
    ) -> None:
        self._users: UserRepository = users
        self._verifier: CredentialVerifier = verifier
        self._token_store: RefreshTokenStore = token_store

    def _build_jwt_payload(self, user: User) -> dict[str, Any]:
        """JWT 토큰 페이로드를 생성합니다 (Build the shared JWT payload)."""
        return {"sub": str(user.id), "email": user.email}

    async def _generate_tokens(
        self,
        db: AsyncSession,
        user: User,
        previous_hash: str | None = None,
        rotate: bool = False,
    ) -> TokenResponse:
        """액세스 토큰과 리프레시 토큰을 생성하고 다이제스트를 저장합니다.

        Sign a new token pair and record the refresh token digest.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user: 사용자 모델 (User model instance)
            previous_hash: 회전 시 방금 검증한 저장 해시 (Stored hash just verified, when rotating)
            rotate: True이면 previous_hash에 대한 CAS로 저장 (Write as compare-and-swap on previous_hash)

        Returns:
            TokenResponse: 토큰 응답 (Token response with access and refresh tokens)

        Raises:
            InvalidRefreshTokenError: 동시 갱신에서 CAS가 실패했을 때
                                      (Another rotation of the same token won the race)
        """
        payload: dict[str, Any] = self._build_jwt_payload(user)
        access_token: str = create_access_token(payload)
        refresh_token: str = create_refresh_token(payload)

        if rotate:
            written: bool = await self._token_store.record_issuance(
                db, user.id, refresh_token, expected=previous_hash
            )
            if not written:
                raise InvalidRefreshTokenError()
        else:
            await self._token_store.record_issuance(db, user.id, refresh_token)

        return TokenResponse(
            access_token=access_token,
            refresh_token=refresh_token,
        )

    async def register(
        self,
        db: AsyncSession,
        data: RegisterRequest,
    ) -> int:
        """회원가입을 처리합니다.

        Create a user account and return its id. The email pre-check is an
        optimisation; the unique constraint is the real guard, and its
        violation is reported exactly like the pre-check.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Registration request data)

        Returns:
            int: 생성된 사용자 ID (New user id)

        Raises:
            DuplicateEmailError: 같은 이메일이 이미 존재할 때 (Email already registered)
        """
        existing: User | None = await self._users.get_by_email(db, data.email)
        if existing is not None:
            raise DuplicateEmailError(data.email)

        password_hash: str = hash_password(data.password)
        try:
            user: User = await self._users.create(
                db,
                {"email": data.email, "password": password_hash, "name": data.name},
            )
        except IntegrityError as exc:
            await db.rollback()
            if not is_unique_violation(exc):
                raise
            # 사전 조회와 INSERT 사이의 경쟁 — lost the race between check and insert
            raise DuplicateEmailError(data.email)

        logger.info("registered user_id=%s", user.id)
        return user.id

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """로그인을 처리합니다.

        Verify credentials and issue a token pair. The new refresh token
        replaces whatever refresh token the user held before.

        Raises:
            AuthenticationError: 잘못된 인증 정보일 때 (Invalid credentials)
        """
        user: User = await self._verifier.verify(db, data.email, data.password)
        tokens: TokenResponse = await self._generate_tokens(db, user)
        logger.info("login succeeded for user_id=%s", user.id)
        return tokens

    async def refresh_tokens(
        self,
        db: AsyncSession,
        data: RefreshRequest,
    ) -> TokenResponse:
        """리프레시 토큰으로 새 토큰 쌍을 발급합니다.

        Exchange a refresh token for a new pair, rotating the stored digest.
        Every rejection raises the same error so callers cannot tell an
        expired token from a replayed or forged one.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 리프레시 요청 데이터 (Refresh request data)

        Returns:
            TokenResponse: 새 토큰 응답 (New token response)

        Raises:
            InvalidRefreshTokenError: 유효하지 않거나 만료/재사용된 리프레시 토큰
                                      (Invalid, expired, or already used refresh token)
        """
        raw: str = data.refresh_token

        # 1. 서명 및 만료 검증 — Signature and expiry, with the refresh secret
        try:
            payload: dict[str, Any] = decode_refresh_token(raw)
        except InvalidToken:
            logger.info("refresh rejected: token failed verification")
            raise InvalidRefreshTokenError()

        # 2. 토큰 유형 확인 — Reject access tokens presented as refresh tokens
        if payload.get("type") != REFRESH_TOKEN_TYPE:
            logger.info("refresh rejected: wrong token class")
            raise InvalidRefreshTokenError()

        # 3. 사용자 및 저장된 다이제스트 확인 — User must exist and hold a digest
        try:
            user_id: int = int(payload["sub"])
        except (KeyError, TypeError, ValueError):
            raise InvalidRefreshTokenError()

        user: User | None = await self._users.get_by_id(db, user_id)
        if user is None or user.hashed_refresh_token is None:
            logger.info("refresh rejected: no active refresh token for user_id=%s", user_id)
            raise InvalidRefreshTokenError()

        # 4. 다이제스트 비교 — Must be the user's current refresh token
        # 회전 CAS는 여기서 읽은 해시 기준 — rotation below is conditioned on this value
        stored_hash: str = user.hashed_refresh_token
        if not await self._token_store.matches(db, user_id, raw):
            logger.warning("refresh rejected: digest mismatch for user_id=%s (possible reuse)", user_id)
            raise InvalidRefreshTokenError()

        # 5. 새 토큰 쌍 발급 및 회전 — Issue a new pair and rotate
        tokens: TokenResponse = await self._generate_tokens(
            db, user, previous_hash=stored_hash, rotate=True
        )
        logger.info("refresh token rotated for user_id=%s", user_id)
        return tokens

    async def get_me(
        self,
        db: AsyncSession,
        identity: AuthUser,
    ) -> UserMeResponse:
        """현재 로그인한 사용자 프로필을 반환합니다.

        Return the profile of the access token holder.

        Raises:
            UnauthorizedError: 토큰의 사용자가 더 이상 존재하지 않을 때
                               (The token's user no longer exists)
        """
        user: User | None = await self._users.get_by_id(db, identity.user_id)
        if user is None:
            raise UnauthorizedError("User not found")

        return UserMeResponse(id=user.id, email=user.email, name=user.name)


# 싱글턴 인스턴스 — Singleton instance
auth_service: AuthService = AuthService()
