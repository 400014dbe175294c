"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Provides pre-configured HTTPException subclasses for common error patterns,
plus the auth-specific errors raised by the session services.

Usage:
    from blogapi.utils.exceptions import DuplicateEmailError, InvalidRefreshTokenError
    raise DuplicateEmailError("a@b.com")
    raise InvalidRefreshTokenError()
"""

from fastapi import HTTPException, status


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    409 Conflict exception.
    Raised when attempting to create a resource that violates a uniqueness constraint.

    Args:
        detail: 오류 메시지 (Error message, default: "Resource already exists")
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    401 Unauthorized exception.
    Raised when authentication is missing, invalid, or expired.

    Args:
        detail: 오류 메시지 (Error message, default: "Authentication required")
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class DuplicateEmailError(DuplicateError):
    """이메일 중복 — 사전 조회 또는 유니크 제약 위반 모두 이 예외로 변환.

    Registration collision, detected by the pre-insert lookup or remapped
    from the storage layer's unique constraint violation.
    """

    def __init__(self, email: str) -> None:
        super().__init__(f"User with email '{email}' already exists")
        self.email: str = email


class AuthenticationError(UnauthorizedError):
    """로그인 실패 — 존재하지 않는 이메일과 잘못된 비밀번호를 구분하지 않음.

    Bad login credentials. Unknown email and wrong password share one message.
    """

    def __init__(self) -> None:
        super().__init__("Invalid email or password")


class InvalidRefreshTokenError(UnauthorizedError):
    """리프레시 실패 — 만료, 위조, 재사용, 유형 불일치를 하나의 메시지로 통합.

    Any refresh failure: bad signature, expired, wrong token class, unknown
    user, no stored digest, or digest mismatch.
    """

    def __init__(self) -> None:
        super().__init__("Invalid or expired refresh token")
