"""인증 관련 Pydantic 요청/응답 스키마 정의.

Authentication-related Pydantic request/response schema definitions.
Covers registration, login, token issuance/refresh, and current user info.
JSON field names are camelCase on the wire; snake_case is accepted on input.
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel
from pydantic.networks import validate_email


class CamelModel(BaseModel):
    """camelCase 직렬화 베이스 (Base model serialising with camelCase aliases)."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


def _check_email(value: str) -> str:
    """이메일 형식만 검증하고 입력값을 그대로 반환합니다.

    Validate the address format without rewriting it. Uniqueness and lookup
    are case-sensitive on the stored value, so the domain is never lowercased.
    """
    if "<" in value or ">" in value:
        raise ValueError("value is not a valid email address")
    validate_email(value)
    return value


class RegisterRequest(CamelModel):
    """회원가입 요청 스키마.

    Registration request schema.

    Attributes:
        email: 로그인 이메일 (Login email, globally unique)
        password: 비밀번호 (Plain text, at least 8 characters, bcrypt-hashed on server)
        name: 표시 이름 (Display name)
    """

    email: str = Field(max_length=255)
    password: str = Field(min_length=8)
    name: str = Field(min_length=1, max_length=100)

    _check_email = field_validator("email")(_check_email)

    @field_validator("password")
    @classmethod
    def _check_password_bytes(cls, value: str) -> str:
        # bcrypt는 72바이트까지만 처리 — bcrypt rejects secrets longer than 72 bytes
        if len(value.encode("utf-8")) > 72:
            raise ValueError("password must be at most 72 bytes")
        return value


class RegisterResponse(CamelModel):
    """회원가입 응답 스키마 (Registration response with the new user id)."""

    id: int


class LoginRequest(CamelModel):
    """로그인 요청 스키마.

    Login request schema.

    Attributes:
        email: 사용자 이메일 (User email, exact match)
        password: 비밀번호 (Plain text password, verified against bcrypt hash)
    """

    email: str = Field(max_length=255)
    password: str = Field(min_length=1)

    _check_email = field_validator("email")(_check_email)


class RefreshRequest(CamelModel):
    """토큰 갱신 요청 스키마.

    Token refresh request schema.
    Exchanges a valid refresh token for a new access/refresh token pair.

    Attributes:
        refresh_token: 기존 리프레시 토큰 (Existing refresh token to exchange)
    """

    refresh_token: str = Field(min_length=1)


class TokenResponse(CamelModel):
    """JWT 토큰 발급 응답 스키마.

    JWT token issuance response schema.
    Returned after successful login or token refresh.

    Attributes:
        access_token: JWT 액세스 토큰 (Short-lived access token)
        refresh_token: JWT 리프레시 토큰 (Long-lived, single-use refresh token)
    """

    access_token: str  # JWT 액세스 토큰 — 만료: 15분 기본 (Access token, default TTL: 15min)
    refresh_token: str  # JWT 리프레시 토큰 — 만료: 7일 기본 (Refresh token, default TTL: 7 days)


class AuthUser(BaseModel):
    """액세스 토큰에서 추출한 인증 사용자 식별 정보.

    Authenticated identity extracted from a verified access token.
    """

    user_id: int
    email: str


class UserMeResponse(CamelModel):
    """현재 사용자 정보 응답 스키마 (GET /auth/me)."""

    id: int
    email: str
    name: str
