"""GitHub API 공통 요청 모듈."""

import logging
from typing import Any

import httpx

from contrib_sieve.exceptions import AuthorizationError, FetchError

logger = logging.getLogger(__name__)

GITHUB_ACCEPT = "application/vnd.github.v3+json"


def build_headers(token: str | None = None) -> dict[str, str]:
    """API 요청 헤더를 생성한다."""
    headers = {"Accept": GITHUB_ACCEPT}
    if token:
        headers["Authorization"] = f"token {token}"
    return headers


async def fetch(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None = None,
    *,
    raise_unauthorized: bool = True,
) -> httpx.Response:
    """GET 요청을 보내고 성공 응답만 반환한다.

    Args:
        client: HTTP 클라이언트
        url: 요청 URL
        headers: 요청 헤더
        raise_unauthorized: True면 401 응답을 AuthorizationError로 보고한다.

    Raises:
        AuthorizationError: 401 응답
        FetchError: 네트워크 오류 또는 그 밖의 실패 응답
    """
    try:
        response = await client.get(url, headers=headers)
    except httpx.HTTPError as e:
        logger.warning(f"Request to {url} failed: {e}")
        raise FetchError(url) from e

    if raise_unauthorized and response.status_code == 401:
        logger.warning(f"Unauthorized response from {url}")
        raise AuthorizationError()

    if not response.is_success:
        logger.error(f"GitHub API error {response.status_code} for {url}")
        raise FetchError(url)

    return response


async def fetch_json(
    client: httpx.AsyncClient,
    url: str,
    headers: dict[str, str] | None = None,
    *,
    raise_unauthorized: bool = True,
) -> Any:
    """GET 요청의 JSON 본문을 반환한다."""
    response = await fetch(
        client, url, headers, raise_unauthorized=raise_unauthorized
    )
    return decode_json(response, url)


def decode_json(response: httpx.Response, url: str) -> Any:
    """응답 본문을 JSON으로 해석한다. 실패하면 FetchError."""
    try:
        return response.json()
    except ValueError as e:
        logger.error(f"Invalid JSON body from {url}")
        raise FetchError(url) from e
