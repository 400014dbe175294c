"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package ensures all models are registered with the
SQLAlchemy metadata before tables are created.

Modules:
    user: 사용자 계정 및 리프레시 토큰 다이제스트 (User accounts and refresh token digest)
"""

from blogapi.models.user import User

__all__ = ["User"]
