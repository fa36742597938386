"""키-값 저장소 프로토콜 정의."""

from typing import Protocol

ACCESS_TOKEN_KEY = "access_token"
STATE_KEY = "state"


class KeyValueStore(Protocol):
    """access token과 OAuth state를 보관하는 저장소 프로토콜."""

    def get(self, key: str) -> str | None:
        """값을 조회한다. 없으면 None."""
        ...

    def set(self, key: str, value: str) -> None:
        """값을 저장한다."""
        ...

    def delete(self, key: str) -> None:
        """값을 삭제한다. 없으면 아무 일도 하지 않는다."""
        ...
