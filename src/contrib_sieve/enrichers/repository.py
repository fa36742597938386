"""저장소 정보와 PR 머지 여부 enrichment 모듈."""

import asyncio
import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from contrib_sieve.exceptions import FetchError
from contrib_sieve.models import (
    EnrichedItem,
    ItemState,
    MergeStatus,
    RepositoryInfo,
    SearchItem,
)
from contrib_sieve.sources.http import fetch_json

logger = logging.getLogger(__name__)

T = TypeVar("T", bound=BaseModel)


def repository_api_url(item: SearchItem) -> str:
    """검색 항목의 저장소 참조에서 상세 정보 URL을 만든다."""
    return item.repository_url.rstrip("/")


class RepositoryEnricher:
    """검색 항목에 저장소 정보와 머지 여부를 채운다.

    저장소 정보는 인스턴스 단위로 캐시되므로 집계 호출마다
    새 인스턴스를 만들어 사용한다.
    """

    def __init__(
        self,
        client: httpx.AsyncClient,
        headers: dict[str, str] | None = None,
        concurrency: int = 8,
    ) -> None:
        """
        Args:
            client: HTTP 클라이언트
            headers: 요청 헤더
            concurrency: 동시 요청 수 상한
        """
        self.client = client
        self.headers = headers
        self._semaphore = asyncio.Semaphore(concurrency)
        self._repositories: dict[str, asyncio.Task[RepositoryInfo]] = {}

    async def _get(self, url: str) -> Any:
        async with self._semaphore:
            return await fetch_json(self.client, url, self.headers)

    async def _load(self, url: str, model: type[T]) -> T:
        """응답을 모델로 검증한다."""
        data = await self._get(url)
        try:
            return model.model_validate(data)
        except ValidationError as e:
            logger.error(f"Unexpected response shape from {url}: {e}")
            raise FetchError(url) from e

    def _repository(self, url: str) -> asyncio.Task[RepositoryInfo]:
        # 동시에 같은 저장소를 요청해도 요청은 하나만 보낸다
        task = self._repositories.get(url)
        if task is None:
            logger.debug(f"Fetching repository {url}")
            task = asyncio.ensure_future(self._load(url, RepositoryInfo))
            self._repositories[url] = task
        return task

    async def fetch_merge_status(self, pull_request_url: str) -> MergeStatus:
        """PR 상세 정보에서 머지 여부를 가져온다."""
        return await self._load(pull_request_url, MergeStatus)

    async def enrich(self, item: SearchItem) -> EnrichedItem:
        """검색 항목 하나를 enrichment 한다.

        닫힌 PR만 머지 여부를 조회한다. 열린 PR은 머지될 수 없고
        이슈에는 머지 개념이 없다.
        """
        repository = await self._repository(repository_api_url(item))

        merged: bool | None = None
        if item.pull_request is not None and item.state == ItemState.closed:
            status = await self.fetch_merge_status(item.pull_request.url)
            merged = status.merged

        return EnrichedItem(item=item, repository=repository, merged=merged)

    async def enrich_many(self, items: list[SearchItem]) -> list[EnrichedItem]:
        """여러 항목을 병렬로 enrichment 한다.

        하나라도 실패하면 남은 요청을 취소하고 예외를 그대로 전파한다.
        결과 순서는 입력 순서와 같다.
        """
        tasks = [asyncio.ensure_future(self.enrich(item)) for item in items]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            pending = [*tasks, *self._repositories.values()]
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            raise

        logger.info(
            f"Enriched {len(results)} item(s) from "
            f"{len(self._repositories)} repositories"
        )
        return list(results)
