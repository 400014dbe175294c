"""리프레시 토큰 저장소 — 사용자당 1개의 리프레시 토큰 다이제스트를 관리.

Refresh Token Store — Keeps, per user, a one-way digest of the single
currently valid refresh token.

Stored value:
    bcrypt( HMAC-SHA256(refresh_secret, raw_token).hexdigest() )

The keyed digest shrinks a long JWT to 64 hex chars, inside bcrypt's 72 byte
limit; bcrypt on top keeps a leaked column as hard to attack as a password.
"""

import hashlib
import hmac
import logging

from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.config import settings
from blogapi.repositories.user_repository import ANY_DIGEST, UserRepository, user_repository
from blogapi.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)


class RefreshTokenStore:
    """리프레시 토큰 다이제스트의 저장과 비교를 담당.

    Records and checks refresh token digests on the users table.
    """

    def __init__(self, users: UserRepository = user_repository) -> None:
        self._users: UserRepository = users

    @staticmethod
    def digest(raw_refresh_token: str) -> str:
        """리프레시 비밀키로 키 지정된 HMAC-SHA256 다이제스트 (hex).

        Keyed fast digest of the raw token, hex encoded.
        """
        return hmac.new(
            settings.JWT_REFRESH_SECRET.encode("utf-8"),
            raw_refresh_token.encode("utf-8"),
            hashlib.sha256,
        ).hexdigest()

    async def record_issuance(
        self,
        db: AsyncSession,
        user_id: int,
        raw_refresh_token: str,
        expected: str | None | object = ANY_DIGEST,
    ) -> bool:
        """새 리프레시 토큰의 다이제스트를 저장하여 이전 토큰을 무효화합니다.

        Store the digest of a freshly issued refresh token, overwriting (and
        thereby revoking) the previous one.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 토큰 소유자 ID (Token owner id)
            raw_refresh_token: 발급된 원본 리프레시 토큰 (Raw refresh token just issued)
            expected: 덮어쓰기 전 저장되어 있어야 하는 해시 — 지정 시 CAS
                      (Hash that must still be stored; turns the write into a compare-and-swap)

        Returns:
            bool: 저장 성공 여부 (False when the compare-and-swap lost a race)
        """
        hashed: str = hash_password(self.digest(raw_refresh_token))
        written: bool = await self._users.set_hashed_refresh_token(
            db, user_id, hashed, expected=expected
        )
        if not written:
            logger.info("refresh digest not written for user_id=%s", user_id)
        return written

    def verify_digest(self, stored_hash: str | None, raw_refresh_token: str) -> bool:
        """저장된 해시와 원본 토큰을 비교합니다 (None이면 항상 False).

        Compare a raw token against a stored hash; a missing hash never matches.
        """
        if not stored_hash:
            return False
        return verify_password(self.digest(raw_refresh_token), stored_hash)

    async def matches(
        self,
        db: AsyncSession,
        user_id: int,
        raw_refresh_token: str,
    ) -> bool:
        """사용자의 현재 리프레시 토큰과 일치하는지 확인합니다.

        Check a raw refresh token against the user's stored digest.
        A missing user, a never-issued token, and an already rotated token
        all yield False.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 사용자 ID (User id)
            raw_refresh_token: 검사할 원본 리프레시 토큰 (Raw refresh token to check)

        Returns:
            bool: 일치 여부 (Whether the token is the user's current one)
        """
        user = await self._users.get_by_id(db, user_id)
        if user is None:
            return False
        return self.verify_digest(user.hashed_refresh_token, raw_refresh_token)


# 싱글턴 인스턴스 — Singleton instance
refresh_token_store: RefreshTokenStore = RefreshTokenStore()
