"""현재 위치(URL) 추상화 모듈."""

import logging
from collections.abc import Callable
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


class Location(Protocol):
    """OAuth 리다이렉트를 주고받는 현재 위치."""

    @property
    def url(self) -> str:
        """현재 URL."""
        ...

    def get_param(self, name: str) -> str | None:
        """쿼리 파라미터 값을 반환한다."""
        ...

    def delete_param(self, name: str) -> None:
        """쿼리 파라미터를 URL에서 제거한다."""
        ...

    def redirect(self, url: str) -> None:
        """사용자를 다른 URL로 보낸다."""
        ...


class UrlLocation:
    """URL 문자열 기반 Location 구현."""

    def __init__(
        self,
        url: str,
        on_redirect: Callable[[str], None] | None = None,
    ) -> None:
        """
        Args:
            url: 현재 URL (OAuth 콜백이면 code, state 파라미터 포함)
            on_redirect: 리다이렉트 시 호출할 함수 (예: 브라우저 열기)
        """
        self._url = httpx.URL(url)
        self.on_redirect = on_redirect
        self.redirected_to: str | None = None

    @property
    def url(self) -> str:
        return str(self._url)

    def get_param(self, name: str) -> str | None:
        return self._url.params.get(name)

    def delete_param(self, name: str) -> None:
        self._url = self._url.copy_remove_param(name)

    def redirect(self, url: str) -> None:
        logger.info(f"Redirecting to {url}")
        self.redirected_to = url
        if self.on_redirect is not None:
            self.on_redirect(url)
