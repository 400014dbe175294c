"""FastAPI 의존성 주입 모듈 — 액세스 토큰 인증.

FastAPI dependency injection module — Access token authentication.
Extracts the bearer token, verifies it with the access secret, and exposes
the caller's identity to downstream handlers.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 — 헤더가 없으면 401
       (HTTPBearer extracts the token; a missing header is a 401)
    3. decode_access_token()이 서명과 만료를 검증
       (decode_access_token verifies signature and expiry)
    4. 토큰 유형이 "access"인지 확인 — 리프레시 토큰은 거부
       (Token class must be "access"; refresh tokens are rejected)
"""

from typing import Annotated

from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials

from blogapi.schemas.auth import AuthUser
from blogapi.utils.exceptions import UnauthorizedError
from blogapi.utils.jwt import ACCESS_TOKEN_TYPE, InvalidToken, decode_access_token

# HTTP Bearer 토큰 추출기 — auto_error=False: 누락 시 403 대신 401을 직접 반환
# (Missing credentials are turned into 401 here instead of HTTPBearer's 403)
security: HTTPBearer = HTTPBearer(auto_error=False)


async def get_current_user(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> AuthUser:
    """액세스 토큰에서 현재 인증된 사용자 식별 정보를 추출합니다.

    Decode the access token from the Authorization header and return the
    caller's identity.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)

    Returns:
        AuthUser: 인증된 사용자 식별 정보 (Authenticated identity: user id and email)

    Raises:
        UnauthorizedError: 토큰 누락, 만료, 위조, 유형 불일치
                           (Missing, expired, forged, or wrong-class token)
    """
    if credentials is None:
        raise UnauthorizedError("Authentication required")

    try:
        payload: dict = decode_access_token(credentials.credentials)
    except InvalidToken:
        raise UnauthorizedError("Invalid or expired token")

    # 토큰 타입 검증 — Reject refresh tokens used as access tokens
    if payload.get("type") != ACCESS_TOKEN_TYPE:
        raise UnauthorizedError("Invalid token type")

    try:
        return AuthUser(user_id=int(payload["sub"]), email=payload["email"])
    except (KeyError, TypeError, ValueError):
        raise UnauthorizedError("Invalid token")
