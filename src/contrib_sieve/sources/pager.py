"""검색 API 페이지네이션 모듈."""

import logging
import re
from typing import Any

import httpx

from contrib_sieve.exceptions import PaginationError
from contrib_sieve.sources.http import decode_json, fetch

logger = logging.getLogger(__name__)

# <url>; rel="name"  (GitHub가 닫는 따옴표를 빠뜨리는 경우가 있다)
_LINK_RE = re.compile(r'^<([^>]*)>\s*;\s*rel="?([^";\s]+)"?$')


def parse_link_header(value: str) -> dict[str, str]:
    """Link 헤더를 {rel: url} 형태로 해석한다.

    Args:
        value: Link 헤더 값 (예: '<https://...&page=2>; rel="next", ...')

    Returns:
        관계 이름을 키로 하는 URL 딕셔너리

    Raises:
        PaginationError: 형식에 맞지 않는 항목이 있는 경우
    """
    links: dict[str, str] = {}
    if not value.strip():
        return links

    for part in value.split(","):
        match = _LINK_RE.match(part.strip())
        if not match:
            raise PaginationError(value)
        url, rel = match.groups()
        links[rel] = url
    return links


class SearchPager:
    """페이지가 나뉜 검색 결과를 끝까지 가져온다."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        """
        Args:
            client: HTTP 클라이언트
        """
        self.client = client

    async def fetch_all_pages(
        self,
        initial_url: str,
        headers: dict[str, str] | None = None,
    ) -> list[dict[str, Any]]:
        """next 링크를 따라가며 모든 페이지 본문을 순서대로 반환한다.

        다음 페이지 요청 여부는 이전 페이지의 헤더로 결정되므로
        페이지는 하나씩 순차적으로 가져온다.

        Raises:
            AuthorizationError: 401 응답
            FetchError: 요청 실패
            PaginationError: Link 헤더 형식 오류
        """
        pages: list[dict[str, Any]] = []
        url: str | None = initial_url

        while url is not None:
            response = await fetch(self.client, url, headers)

            next_url = None
            link = response.headers.get("Link")
            if link is not None:
                next_url = parse_link_header(link).get("next")

            pages.append(decode_json(response, url))
            logger.debug(f"Fetched page {len(pages)} from {url}")
            url = next_url

        logger.info(f"Fetched {len(pages)} search page(s)")
        return pages
