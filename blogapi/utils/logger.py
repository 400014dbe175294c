"""로깅 설정 유틸리티.

Console logging setup for the application.
Service modules log through ``logging.getLogger(__name__)``; request-level
events go through the Axiom middleware, which falls back to the
``blogapi.access`` logger when Axiom is not configured.
"""

import logging

from blogapi.config import settings

_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"


def configure_logging(level: str | None = None) -> None:
    """패키지 로거에 콘솔 핸들러를 설치합니다.

    Attach a console handler to the ``blogapi`` logger.
    Calling it more than once does not stack handlers.

    Args:
        level: 로그 레벨 이름, None이면 LOG_LEVEL 설정 사용
               (Log level name; defaults to settings.LOG_LEVEL)
    """
    root = logging.getLogger("blogapi")
    root.setLevel((level or settings.LOG_LEVEL).upper())

    if not any(getattr(h, "_blogapi", False) for h in root.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_FORMAT))
        handler._blogapi = True  # type: ignore[attr-defined]
        root.addHandler(handler)
