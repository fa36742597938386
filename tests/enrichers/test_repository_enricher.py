"""저장소 enrichment 테스트."""

import asyncio

import httpx
import pytest
import respx

from conftest import repo_url, repository_payload, search_item
from contrib_sieve.enrichers.repository import RepositoryEnricher, repository_api_url
from contrib_sieve.exceptions import FetchError
from contrib_sieve.models import SearchItem


def make_item(*args: object, **kwargs: object) -> SearchItem:
    return SearchItem.model_validate(search_item(*args, **kwargs))


class TestRepositoryApiUrl:
    def test_strips_trailing_slash(self) -> None:
        item = SearchItem.model_validate(
            {**search_item("repo1"), "repository_url": repo_url("repo1") + "/"}
        )
        assert repository_api_url(item) == repo_url("repo1")


class TestRepositoryEnricher:
    """RepositoryEnricher 테스트."""

    @pytest.mark.asyncio
    async def test_fetches_repository_once(self, respx_mock: respx.MockRouter) -> None:
        """한 저장소를 참조하는 항목이 5개여도 저장소 조회는 1번이다."""
        route = respx_mock.get(repo_url("repo1")).mock(
            return_value=httpx.Response(200, json=repository_payload("repo1"))
        )
        items = [make_item("repo1", n) for n in range(1, 6)]

        async with httpx.AsyncClient() as client:
            enriched = await RepositoryEnricher(client).enrich_many(items)

        assert route.call_count == 1
        assert len(enriched) == 5
        assert all(e.repository.full_name == "user/repo1" for e in enriched)

    @pytest.mark.asyncio
    async def test_concurrent_misses_share_one_fetch(
        self, respx_mock: respx.MockRouter
    ) -> None:
        """동시에 캐시를 놓쳐도 요청은 하나만 나간다."""
        route = respx_mock.get(repo_url("repo1")).mock(
            return_value=httpx.Response(200, json=repository_payload("repo1"))
        )

        async with httpx.AsyncClient() as client:
            enricher = RepositoryEnricher(client)
            await asyncio.gather(
                enricher.enrich(make_item("repo1", 1)),
                enricher.enrich(make_item("repo1", 2)),
            )

        assert route.call_count == 1

    @pytest.mark.asyncio
    @pytest.mark.respx(assert_all_called=False)
    async def test_open_pull_request_skips_merge_status(
        self, respx_mock: respx.MockRouter
    ) -> None:
        """열린 PR은 머지 여부를 조회하지 않는다."""
        respx_mock.get(repo_url("repo1")).mock(
            return_value=httpx.Response(200, json=repository_payload("repo1"))
        )
        detail = respx_mock.get(f"{repo_url('repo1')}/pulls/1").mock(
            return_value=httpx.Response(200, json={"merged": False})
        )

        async with httpx.AsyncClient() as client:
            enriched = await RepositoryEnricher(client).enrich(make_item("repo1", 1))

        assert not detail.called
        assert enriched.merged is None

    @pytest.mark.asyncio
    @pytest.mark.parametrize("merged", [True, False])
    async def test_closed_pull_request_fetches_merge_status(
        self, respx_mock: respx.MockRouter, merged: bool
    ) -> None:
        """닫힌 PR은 항상 머지 여부를 조회한다."""
        respx_mock.get(repo_url("repo1")).mock(
            return_value=httpx.Response(200, json=repository_payload("repo1"))
        )
        detail = respx_mock.get(f"{repo_url('repo1')}/pulls/2").mock(
            return_value=httpx.Response(200, json={"merged": merged})
        )

        async with httpx.AsyncClient() as client:
            enriched = await RepositoryEnricher(client).enrich(
                make_item("repo1", 2, state="closed")
            )

        assert detail.call_count == 1
        assert enriched.merged is merged

    @pytest.mark.asyncio
    async def test_closed_issue_skips_merge_status(
        self, respx_mock: respx.MockRouter
    ) -> None:
        """이슈는 닫혀 있어도 머지 여부가 없다."""
        respx_mock.get(repo_url("repo1")).mock(
            return_value=httpx.Response(200, json=repository_payload("repo1"))
        )

        async with httpx.AsyncClient() as client:
            enriched = await RepositoryEnricher(client).enrich(
                make_item("repo1", state="closed", pull_request=False)
            )

        assert enriched.merged is None

    @pytest.mark.asyncio
    async def test_repository_failure_aborts(self, respx_mock: respx.MockRouter) -> None:
        """저장소 조회가 하나라도 실패하면 전체가 실패한다."""
        respx_mock.get(repo_url("repo1")).mock(
            return_value=httpx.Response(200, json=repository_payload("repo1"))
        )
        respx_mock.get(repo_url("repo2")).mock(return_value=httpx.Response(404))

        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError) as exc_info:
                await RepositoryEnricher(client).enrich_many(
                    [make_item("repo1"), make_item("repo2")]
                )

        assert exc_info.value.url == repo_url("repo2")

    @pytest.mark.asyncio
    async def test_merge_status_failure_aborts(self, respx_mock: respx.MockRouter) -> None:
        respx_mock.get(repo_url("repo1")).mock(
            return_value=httpx.Response(200, json=repository_payload("repo1"))
        )
        respx_mock.get(f"{repo_url('repo1')}/pulls/3").mock(
            side_effect=httpx.ReadTimeout("timeout")
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError, match="pulls/3"):
                await RepositoryEnricher(client).enrich_many(
                    [make_item("repo1", 3, state="closed")]
                )

    @pytest.mark.asyncio
    async def test_unexpected_repository_shape(self, respx_mock: respx.MockRouter) -> None:
        """필수 필드가 없는 응답은 FetchError가 된다."""
        respx_mock.get(repo_url("repo1")).mock(
            return_value=httpx.Response(200, json={"stargazers_count": 3})
        )

        async with httpx.AsyncClient() as client:
            with pytest.raises(FetchError):
                await RepositoryEnricher(client).enrich(make_item("repo1"))

    @pytest.mark.asyncio
    async def test_preserves_input_order(self, respx_mock: respx.MockRouter) -> None:
        for name in ("repo1", "repo2", "repo3"):
            respx_mock.get(repo_url(name)).mock(
                return_value=httpx.Response(200, json=repository_payload(name))
            )
        items = [make_item("repo3"), make_item("repo1"), make_item("repo2")]

        async with httpx.AsyncClient() as client:
            enriched = await RepositoryEnricher(client, concurrency=1).enrich_many(items)

        assert [e.repository.full_name for e in enriched] == [
            "user/repo3",
            "user/repo1",
            "user/repo2",
        ]
