"""사용자 레포지토리 — 사용자 조회/생성 및 리프레시 토큰 다이제스트 갱신.

User Repository — Lookup, creation, and refresh digest updates for users.
Extends BaseRepository with email lookup and a single-statement digest update.
"""

from datetime import datetime, timezone

from sqlalchemy import Select, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from blogapi.models.user import User
from blogapi.repositories.base import BaseRepository

# 다이제스트 비교 생략 표시 — Sentinel meaning "overwrite unconditionally"
ANY_DIGEST: object = object()


# PostgreSQL unique_violation SQLSTATE
_UNIQUE_VIOLATION_SQLSTATE = "23505"


def is_unique_violation(exc: IntegrityError) -> bool:
    """무결성 오류가 유니크 제약 위반인지 판별합니다.

    True only for unique-constraint violations. asyncpg reports the SQLSTATE
    on the driver error; SQLite only says so in the message.
    """
    orig = exc.orig
    sqlstate = getattr(orig, "sqlstate", None) or getattr(orig, "pgcode", None)
    if sqlstate is not None:
        return sqlstate == _UNIQUE_VIOLATION_SQLSTATE
    return "unique constraint" in str(orig).lower()


class UserRepository(BaseRepository[User]):
    """사용자 테이블에 대한 데이터베이스 쿼리를 담당하는 레포지토리.

    Repository handling database queries for the users table.
    """

    def __init__(self) -> None:
        super().__init__(User)

    async def get_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> User | None:
        """이메일로 사용자를 조회합니다 (대소문자 구분).

        Retrieve a user by exact, case-sensitive email match.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 조회할 이메일 (Email to look up)

        Returns:
            User | None: 조회된 사용자 또는 None (Found user or None)
        """
        query: Select = (
            select(User)
            .where(User.email == email)
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def set_hashed_refresh_token(
        self,
        db: AsyncSession,
        user_id: int,
        hashed_refresh_token: str | None,
        expected: str | None | object = ANY_DIGEST,
    ) -> bool:
        """리프레시 토큰 다이제스트를 단일 UPDATE로 덮어씁니다.

        Overwrite the stored refresh digest with one UPDATE statement.
        When ``expected`` is given the row is only written if the stored value
        still equals it (compare-and-swap), so two racing rotations of the same
        token cannot both succeed.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            user_id: 대상 사용자 ID (Target user id)
            hashed_refresh_token: 새 다이제스트 해시 또는 None (New digest hash, or None to clear)
            expected: 현재 저장되어 있어야 하는 값 (Value that must currently be stored)

        Returns:
            bool: 행이 갱신되었는지 여부 (Whether a row was written)
        """
        stmt = (
            update(User)
            .where(User.id == user_id)
            .values(
                hashed_refresh_token=hashed_refresh_token,
                updated_at=datetime.now(timezone.utc),
            )
        )
        if expected is not ANY_DIGEST:
            if expected is None:
                stmt = stmt.where(User.hashed_refresh_token.is_(None))
            else:
                stmt = stmt.where(User.hashed_refresh_token == expected)

        result = await db.execute(stmt)
        await db.flush()
        return result.rowcount == 1


# 싱글턴 인스턴스 — Singleton instance
user_repository: UserRepository = UserRepository()
