"""사용자 SQLAlchemy ORM 모델 정의.

User SQLAlchemy ORM model definition.
Holds login credentials and the digest of the single currently valid refresh token.

Tables:
    - users: 사용자 계정 (User accounts, email is globally unique)
"""

from datetime import datetime, timezone

from sqlalchemy import DateTime, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from blogapi.database import Base


class User(Base):
    """사용자 모델 — 시스템 사용자 계정 정보.

    User model — System user account information.
    Email is unique across the whole table and compared case-sensitively.

    Attributes:
        id: 고유 식별자 (Auto-increment primary key)
        email: 로그인 이메일 (Login email, globally unique)
        password: bcrypt 해시된 비밀번호 (bcrypt-hashed password)
        name: 표시 이름 (Display name)
        hashed_refresh_token: 리프레시 토큰 다이제스트의 bcrypt 해시
                              (bcrypt hash of the refresh token digest, None until first login)
        created_at: 생성 일시 UTC (Creation timestamp)
        updated_at: 수정 일시 UTC (Last update timestamp)
    """

    __tablename__ = "users"

    # 사용자 고유 식별자 — User identifier (auto-increment)
    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    # 로그인 이메일 — 전역 고유 (unique constraint is the final guard against duplicates)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False)
    # 비밀번호 해시 — bcrypt hashed password (평문 저장 금지, never store plaintext)
    password: Mapped[str] = mapped_column(String(255), nullable=False)
    # 표시 이름 — Display name
    name: Mapped[str] = mapped_column(String(100), nullable=False)
    # 리프레시 토큰 다이제스트 — 사용자당 최대 1개 (at most one valid refresh token per user)
    hashed_refresh_token: Mapped[str | None] = mapped_column(String(255), nullable=True)
    # 생성 일시 — Record creation timestamp (UTC)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    # 수정 일시 — Last modification timestamp (UTC, auto-updated)
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))
