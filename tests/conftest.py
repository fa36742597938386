"""공통 테스트 fixture."""

from pathlib import Path
from typing import Any

import pytest

from contrib_sieve.auth import UrlLocation
from contrib_sieve.config import Settings
from contrib_sieve.storage import MemoryStore

API = "https://api.github.com"
GATEWAY = "https://gateway.test/authenticate"
PR_SEARCH_URL = f"{API}/search/issues?per_page=100&q=type%3Apr%20author%3Atest"
ISSUE_SEARCH_URL = f"{API}/search/issues?per_page=100&q=type%3Aissue%20author%3Atest"


def repo_url(name: str) -> str:
    """저장소 API URL을 반환한다."""
    return f"{API}/repos/user/{name}"


def search_item(
    repo: str,
    number: int = 1,
    state: str = "open",
    updated_at: str = "2024-01-01T00:00:00Z",
    association: str = "CONTRIBUTOR",
    pull_request: bool = True,
) -> dict[str, Any]:
    """검색 API 응답 항목을 생성한다."""
    item: dict[str, Any] = {
        "repository_url": repo_url(repo),
        "author_association": association,
        "state": state,
        "updated_at": updated_at,
    }
    if pull_request:
        item["pull_request"] = {"url": f"{repo_url(repo)}/pulls/{number}"}
    return item


def repository_payload(name: str, stars: int = 1, language: str = "Python") -> dict[str, Any]:
    """저장소 API 응답을 생성한다."""
    return {
        "html_url": f"https://github.com/user/{name}",
        "full_name": f"user/{name}",
        "stargazers_count": stars,
        "language": language,
    }


@pytest.fixture
def test_settings(tmp_path: Path) -> Settings:
    """테스트용 설정을 반환한다."""
    return Settings(
        oauth_client_id="client",
        oauth_gateway_url=GATEWAY,
        redirect_uri="http://localhost:8000/",
        token_store_path=tmp_path / "auth.json",
    )


@pytest.fixture
def store() -> MemoryStore:
    """빈 메모리 저장소를 반환한다."""
    return MemoryStore()


@pytest.fixture
def location() -> UrlLocation:
    """콜백 파라미터가 없는 Location을 반환한다."""
    return UrlLocation("http://localhost:8000/")
