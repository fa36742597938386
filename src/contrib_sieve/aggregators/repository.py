"""저장소별 집계 모듈."""

import logging
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import quote

from contrib_sieve.models import (
    EnrichedItem,
    ItemState,
    ItemType,
    RepoAggregate,
    RepositoryInfo,
    SearchItem,
)

logger = logging.getLogger(__name__)

DEFAULT_WEB_URL = "https://github.com"


def is_external(item: SearchItem) -> bool:
    """다른 사람/조직의 저장소에 작성한 항목인지 확인한다."""
    return not item.is_owned


def build_search_url(
    author: str,
    item_type: ItemType,
    full_name: str,
    state: str,
    web_url: str = DEFAULT_WEB_URL,
) -> str:
    """GitHub 웹 검색 URL을 생성한다.

    예: https://github.com/search?utf8=✓&q=author%3Atest%20type%3Apr%20repo%3Aa%2Fb%20is%3Aopen
    """
    query = f"author:{author} type:{item_type.value} repo:{full_name} is:{state}"
    return f"{web_url}/search?utf8=✓&q={quote(query, safe='')}"


@dataclass
class _Group:
    """집계 중인 저장소 그룹."""

    repository: RepositoryInfo
    updated_at: datetime
    open: int = 0
    closed: int = 0
    merged: int = 0

    def add(self, enriched: EnrichedItem) -> None:
        item = enriched.item
        if item.state == ItemState.open:
            self.open += 1
        else:
            self.closed += 1
        # 머지는 closed와 별개로 함께 센다
        if enriched.merged:
            self.merged += 1
        if item.updated_at > self.updated_at:
            self.updated_at = item.updated_at


def aggregate(
    enriched_items: Iterable[EnrichedItem],
    author: str,
    item_type: ItemType,
    web_url: str = DEFAULT_WEB_URL,
) -> list[RepoAggregate]:
    """enrichment 된 항목을 저장소별로 집계한다.

    Args:
        enriched_items: enrichment 된 검색 항목
        author: 검색한 작성자 로그인
        item_type: PR 또는 이슈
        web_url: 검색 링크에 사용할 GitHub 웹 URL

    Returns:
        가장 최근에 수정된 저장소부터 정렬된 집계 목록
    """
    groups: dict[str, _Group] = {}
    skipped = 0

    for enriched in enriched_items:
        item = enriched.item
        if not is_external(item):
            skipped += 1
            continue

        # 표시 이름이 아닌 저장소 URL로 묶는다 (이름 변경 대비)
        key = item.repository_url.rstrip("/")
        group = groups.get(key)
        if group is None:
            group = _Group(repository=enriched.repository, updated_at=item.updated_at)
            groups[key] = group
        group.add(enriched)

    if skipped:
        logger.debug(f"Skipped {skipped} item(s) on owned repositories")

    is_pr = item_type == ItemType.pr
    aggregates = []
    for key, group in groups.items():
        full_name = group.repository.full_name
        aggregates.append(
            RepoAggregate(
                repository_url=key,
                repository=group.repository,
                open=group.open,
                closed=group.closed,
                merged=group.merged if is_pr else None,
                updated_at=group.updated_at,
                open_html_url=build_search_url(
                    author, item_type, full_name, "open", web_url
                ),
                closed_html_url=build_search_url(
                    author, item_type, full_name, "closed", web_url
                ),
                merged_html_url=build_search_url(
                    author, item_type, full_name, "merged", web_url
                )
                if is_pr
                else None,
            )
        )

    # sorted()는 안정 정렬이므로 동률은 처음 등장한 순서를 유지한다
    return sorted(aggregates, key=lambda a: a.updated_at, reverse=True)
