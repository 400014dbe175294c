"""자격 증명 검증기 — 이메일과 비밀번호로 사용자를 확인.

Credential Verifier — Checks an email/password pair against stored users.
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.models.user import User
from blogapi.repositories.user_repository import UserRepository, user_repository
from blogapi.utils.exceptions import AuthenticationError
from blogapi.utils.password import hash_password, verify_password

logger = logging.getLogger(__name__)


class CredentialVerifier:
    """로그인 자격 증명 검증 서비스.

    Verifies login credentials without side effects.
    """

    def __init__(self, users: UserRepository = user_repository) -> None:
        self._users: UserRepository = users
        self._dummy_hash: str | None = None

    def _timing_hash(self) -> str:
        # 존재하지 않는 사용자도 동일한 bcrypt 비용을 지불 — same bcrypt cost for unknown emails
        if self._dummy_hash is None:
            self._dummy_hash = hash_password("credential-verifier-dummy")
        return self._dummy_hash

    async def verify(
        self,
        db: AsyncSession,
        email: str,
        password: str,
    ) -> User:
        """이메일과 비밀번호를 검증하고 사용자를 반환합니다.

        Verify credentials and return the matching user.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 이메일, 대소문자 구분 (Email, exact match)
            password: 평문 비밀번호 (Plain text password)

        Returns:
            User: 인증된 사용자 (Authenticated user)

        Raises:
            AuthenticationError: 이메일이 없거나 비밀번호가 틀릴 때 — 동일한 메시지
                                 (Unknown email or wrong password, same message for both)
        """
        user: User | None = await self._users.get_by_email(db, email)
        if user is None:
            verify_password(password, self._timing_hash())
            logger.info("login rejected: unknown email")
            raise AuthenticationError()

        if not verify_password(password, user.password):
            logger.info("login rejected: bad password for user_id=%s", user.id)
            raise AuthenticationError()

        return user


# 싱글턴 인스턴스 — Singleton instance
credential_verifier: CredentialVerifier = CredentialVerifier()
