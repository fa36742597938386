"""데이터 모델 정의."""

from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field

# 저장소 소유자/멤버가 작성한 항목은 집계에서 제외한다
OWNED_ASSOCIATIONS = frozenset({"OWNER", "MEMBER"})


class ItemType(str, Enum):
    """검색 대상 종류."""

    pr = "pr"
    issue = "issue"


class ItemState(str, Enum):
    """이슈/PR 상태."""

    open = "open"
    closed = "closed"


class PullRequestRef(BaseModel):
    """검색 결과에 포함된 PR 참조."""

    url: str = Field(description="PR 상세 API URL")


class SearchItem(BaseModel):
    """이슈 검색 API의 결과 항목."""

    repository_url: str = Field(description="저장소 API URL")
    pull_request: PullRequestRef | None = Field(
        default=None, description="PR 참조. 없으면 이슈."
    )
    author_association: str = Field(
        default="NONE", description="작성자와 저장소의 관계 (OWNER, MEMBER, ...)"
    )
    state: ItemState = Field(description="상태 (open | closed)")
    updated_at: datetime = Field(description="마지막 수정 시각")

    @property
    def is_owned(self) -> bool:
        """작성자가 저장소 소유자 또는 멤버인지 확인한다."""
        return self.author_association.upper() in OWNED_ASSOCIATIONS


class RepositoryInfo(BaseModel):
    """GitHub 저장소 정보."""

    model_config = ConfigDict(frozen=True)

    html_url: str = Field(description="저장소 웹 URL")
    full_name: str = Field(description="저장소 전체 이름 (owner/repo)")
    stargazers_count: int = Field(default=0, description="총 스타 수")
    language: str | None = Field(default=None, description="주 프로그래밍 언어")


class MergeStatus(BaseModel):
    """PR 머지 여부."""

    merged: bool = Field(default=False, description="머지 여부")


class EnrichedItem(BaseModel):
    """저장소 정보와 머지 여부가 채워진 검색 항목."""

    item: SearchItem = Field(description="원본 검색 항목")
    repository: RepositoryInfo = Field(description="저장소 정보")
    merged: bool | None = Field(
        default=None, description="머지 여부. 이슈와 열린 PR은 None."
    )


class RepoAggregate(BaseModel):
    """저장소별 집계 결과."""

    model_config = ConfigDict(frozen=True)

    repository_url: str = Field(description="저장소 API URL")
    repository: RepositoryInfo = Field(description="저장소 정보")
    open: int = Field(default=0, ge=0, description="열린 항목 수")
    closed: int = Field(default=0, ge=0, description="닫힌 항목 수 (머지 포함)")
    merged: int | None = Field(
        default=None, ge=0, description="머지된 PR 수. 이슈 집계에서는 None."
    )
    updated_at: datetime = Field(description="가장 최근 수정 시각")
    open_html_url: str = Field(description="열린 항목 검색 URL")
    closed_html_url: str = Field(description="닫힌 항목 검색 URL")
    merged_html_url: str | None = Field(
        default=None, description="머지된 PR 검색 URL"
    )

    @property
    def total(self) -> int:
        return self.open + self.closed


class User(BaseModel):
    """GitHub 사용자 프로필."""

    login: str = Field(description="로그인 이름")
    html_url: str = Field(description="프로필 URL")
    name: str | None = Field(default=None, description="표시 이름")
    bio: str | None = Field(default=None, description="소개")
    location: str | None = Field(default=None, description="위치")
    avatar_url: str | None = Field(default=None, description="아바타 이미지 URL")
