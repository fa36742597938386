"""GitHub 기여 집계 클라이언트."""

import logging
import re
from collections.abc import AsyncIterator
from contextlib import asynccontextmanager
from typing import Any, Self
from urllib.parse import quote

import httpx
from pydantic import ValidationError

from contrib_sieve.aggregators import aggregate, is_external
from contrib_sieve.auth import Authorizer, Location, UrlLocation
from contrib_sieve.config import Settings
from contrib_sieve.config import settings as default_settings
from contrib_sieve.enrichers import RepositoryEnricher
from contrib_sieve.exceptions import AuthorizationError, FetchError, InvalidUsernameError
from contrib_sieve.models import ItemType, RepoAggregate, SearchItem, User
from contrib_sieve.sources import SearchPager, build_headers, fetch_json
from contrib_sieve.storage import KeyValueStore, MemoryStore

logger = logging.getLogger(__name__)

# 검색 쿼리 문법을 깨뜨리는 문자(/, 공백, :)는 허용하지 않는다
_AUTHOR_RE = re.compile(r"^[^/\s:]+$")


def validate_author(author: str) -> str:
    """GitHub 사용자 이름을 검증한다."""
    if not author or not _AUTHOR_RE.match(author):
        raise InvalidUsernameError(author)
    return author


class GitHubClient:
    """작성자의 PR/이슈를 저장소별로 집계한다.

    401 응답을 받으면 저장된 token을 지우고 None을 반환한다.
    호출자는 None을 받으면 authorize()를 다시 호출하면 된다.
    """

    def __init__(
        self,
        author: str,
        *,
        settings: Settings | None = None,
        store: KeyValueStore | None = None,
        location: Location | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        """
        Args:
            author: 집계할 GitHub 사용자 이름
            settings: 설정. None이면 전역 설정 사용.
            store: token 저장소. None이면 메모리 저장소.
            location: OAuth 리다이렉트용 현재 위치. None이면 redirect_uri.
            http_client: 사용할 HTTP 클라이언트. None이면 요청마다 생성한다.

        Raises:
            InvalidUsernameError: 사용할 수 없는 사용자 이름
        """
        self.author = validate_author(author)
        self.settings = settings or default_settings
        self.store = store if store is not None else MemoryStore()
        self.location = location or UrlLocation(self.settings.redirect_uri)
        self.http_client = http_client
        self._owns_client = False
        self._authorization: str | None = None
        self.authorizer = Authorizer(
            store=self.store,
            location=self.location,
            client_id=self.settings.oauth_client_id,
            gateway_url=self.settings.oauth_gateway_url,
            web_url=self.settings.github_web_url,
            http_client=http_client,
            timeout=self.settings.request_timeout,
        )

    async def __aenter__(self) -> Self:
        if self.http_client is None:
            self.http_client = httpx.AsyncClient(timeout=self.settings.request_timeout)
            self.authorizer.http_client = self.http_client
            self._owns_client = True
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        if self._owns_client and self.http_client is not None:
            await self.http_client.aclose()
            self.http_client = None
            self.authorizer.http_client = None
            self._owns_client = False

    @property
    def is_authorized(self) -> bool:
        return self._authorization is not None

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self.http_client is not None:
            yield self.http_client
            return
        async with httpx.AsyncClient(timeout=self.settings.request_timeout) as client:
            yield client

    def _headers(self) -> dict[str, str]:
        return build_headers(self._authorization)

    def _invalidate(self) -> None:
        self._authorization = None
        self.authorizer.invalidate()

    def search_url(self, item_type: ItemType) -> str:
        """작성자 검색 API URL을 생성한다."""
        query = f"type:{item_type.value} author:{self.author}"
        return (
            f"{self.settings.github_api_url}/search/issues"
            f"?per_page={self.settings.per_page}&q={quote(query, safe='')}"
        )

    def _parse_items(self, pages: list[Any], url: str) -> list[SearchItem]:
        """검색 페이지 본문에서 항목을 추출한다."""
        items: list[SearchItem] = []
        for page in pages:
            if not isinstance(page, dict):
                logger.error(f"Unexpected search page from {url}")
                raise FetchError(url)
            try:
                items.extend(
                    SearchItem.model_validate(raw) for raw in page.get("items") or []
                )
            except ValidationError as e:
                logger.error(f"Unexpected search item from {url}: {e}")
                raise FetchError(url) from e
        return items

    async def _aggregate(self, item_type: ItemType) -> list[RepoAggregate] | None:
        url = self.search_url(item_type)
        logger.info(f"Aggregating {item_type.value} items for {self.author}")

        try:
            async with self._session() as client:
                headers = self._headers()
                pages = await SearchPager(client).fetch_all_pages(url, headers)
                items = self._parse_items(pages, url)

                # 소유/멤버 저장소는 저장소 정보를 조회하기 전에 제외한다
                external = [item for item in items if is_external(item)]
                logger.info(
                    f"Found {len(items)} item(s), {len(external)} on external repositories"
                )

                enricher = RepositoryEnricher(
                    client, headers, concurrency=self.settings.enrich_concurrency
                )
                enriched = await enricher.enrich_many(external)
        except AuthorizationError:
            logger.warning("Access token rejected, authorization required")
            self._invalidate()
            return None

        return aggregate(
            enriched, self.author, item_type, web_url=self.settings.github_web_url
        )

    async def aggregate_pull_requests(self) -> list[RepoAggregate] | None:
        """작성자의 PR을 저장소별로 집계한다.

        Returns:
            최근 수정 순으로 정렬된 집계 목록. 인증이 필요하면 None.

        Raises:
            FetchError: 요청 실패
            PaginationError: Link 헤더 형식 오류
        """
        return await self._aggregate(ItemType.pr)

    async def aggregate_issues(self) -> list[RepoAggregate] | None:
        """작성자의 이슈를 저장소별로 집계한다."""
        return await self._aggregate(ItemType.issue)

    async def get_user(self) -> User | None:
        """작성자의 프로필을 가져온다. 인증이 필요하면 None."""
        url = f"{self.settings.github_api_url}/users/{quote(self.author, safe='')}"
        try:
            async with self._session() as client:
                data = await fetch_json(client, url, self._headers())
        except AuthorizationError:
            logger.warning("Access token rejected, authorization required")
            self._invalidate()
            return None

        try:
            return User.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected user response from {url}: {e}")
            raise FetchError(url) from e

    async def authorize(self) -> str | None:
        """access token을 확보한다. 리다이렉트가 필요하면 None."""
        self._authorization = await self.authorizer.authorize()
        return self._authorization
