"""JWT 토큰 생성 및 검증 유틸리티 모듈.

JWT token creation and verification utility module.
Provides the generic sign/verify pair plus access/refresh helpers.

Access and refresh tokens are signed with different secrets, so leaking one
secret cannot be used to forge the other kind of token.

JWT Payload Structure:
    액세스 토큰 (Access token):
    {
        "sub": "42",                # 사용자 ID 문자열 (User identifier)
        "email": "a@b.com",         # 사용자 이메일 (User email)
        "type": "access",           # 토큰 유형 (Token class)
        "iat": 1234567000,          # 발급 시간 (Issued at)
        "exp": 1234567890           # 만료 시간 UNIX timestamp (Expiration)
    }
    리프레시 토큰은 type="refresh" 이고 매 발급마다 고유한 "jti" 를 가집니다.
    Refresh tokens carry type="refresh" and a per-issuance unique "jti" nonce.
"""

import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

import jwt

from blogapi.config import settings

ACCESS_TOKEN_TYPE = "access"
REFRESH_TOKEN_TYPE = "refresh"


class InvalidToken(Exception):
    """서명 불일치, 만료, 형식 오류 — Bad signature, expired, or malformed token."""


def sign_token(payload: dict[str, Any], secret: str, ttl: timedelta) -> str:
    """페이로드에 만료 시간을 추가하고 서명합니다.

    Sign a payload, stamping it with an absolute expiry of now + ttl.

    Args:
        payload: JWT 페이로드 데이터 (Claims to encode; not mutated)
        secret: 서명 비밀키 (Signing secret)
        ttl: 유효 기간 (Token lifetime)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)
    """
    now: datetime = datetime.now(timezone.utc)
    to_encode: dict[str, Any] = payload.copy()
    to_encode.update({"iat": now, "exp": now + ttl})
    return jwt.encode(to_encode, secret, algorithm=settings.JWT_ALGORITHM)


def verify_token(token: str, secret: str) -> dict[str, Any]:
    """JWT 토큰을 디코딩하고 검증합니다.

    Decode and verify a JWT token string.

    Args:
        token: JWT 토큰 문자열 (Encoded JWT token string)
        secret: 검증 비밀키 (Secret the token must be signed with)

    Returns:
        dict[str, Any]: 디코딩된 페이로드 딕셔너리 (Decoded payload dictionary)

    Raises:
        InvalidToken: 만료, 서명 불일치, 형식 오류 (Expired, bad signature, or malformed)
    """
    try:
        return jwt.decode(
            token,
            secret,
            algorithms=[settings.JWT_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.PyJWTError as exc:
        raise InvalidToken(str(exc)) from exc


def create_access_token(data: dict[str, Any]) -> str:
    """JWT 액세스 토큰을 생성합니다.

    Generate a JWT access token signed with the access secret.
    Token expires after JWT_ACCESS_EXPIRATION (default: 15m).

    Args:
        data: JWT 페이로드 데이터. 일반적으로 {"sub": user_id, "email": email}
              (JWT payload data, typically user id and email)

    Returns:
        str: 인코딩된 JWT 문자열 (Encoded JWT token string)

    Example:
        token = create_access_token({"sub": str(user.id), "email": user.email})
    """
    payload: dict[str, Any] = {**data, "type": ACCESS_TOKEN_TYPE}
    return sign_token(payload, settings.JWT_ACCESS_SECRET, settings.access_token_ttl)


def create_refresh_token(data: dict[str, Any]) -> str:
    """JWT 리프레시 토큰을 생성합니다.

    Generate a JWT refresh token signed with the refresh secret.
    Token expires after JWT_REFRESH_EXPIRATION (default: 7d).
    A fresh "jti" makes every issuance unique even within the same second.

    Args:
        data: JWT 페이로드 데이터 (JWT payload data, same structure as access token)

    Returns:
        str: 인코딩된 JWT 리프레시 토큰 문자열 (Encoded JWT refresh token string)
    """
    payload: dict[str, Any] = {
        **data,
        "type": REFRESH_TOKEN_TYPE,
        "jti": secrets.token_hex(16),
    }
    return sign_token(payload, settings.JWT_REFRESH_SECRET, settings.refresh_token_ttl)


def decode_access_token(token: str) -> dict[str, Any]:
    """액세스 비밀키로 토큰을 검증합니다 (Verify a token with the access secret)."""
    return verify_token(token, settings.JWT_ACCESS_SECRET)


def decode_refresh_token(token: str) -> dict[str, Any]:
    """리프레시 비밀키로 토큰을 검증합니다 (Verify a token with the refresh secret)."""
    return verify_token(token, settings.JWT_REFRESH_SECRET)
