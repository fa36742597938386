"""예외 정의 모듈."""


class ContribSieveError(Exception):
    """contrib-sieve 예외의 기본 클래스."""


class FetchError(ContribSieveError):
    """요청 실패 (네트워크 오류 또는 2xx 이외의 응답)."""

    def __init__(self, url: str) -> None:
        self.url = url
        super().__init__(f"Could not fetch {url}")


class AuthorizationError(ContribSieveError):
    """인증 실패 (401 응답 또는 OAuth state 검증 실패)."""

    def __init__(self, reason: str = "unauthorized") -> None:
        self.reason = reason
        super().__init__(f"Authorization error: {reason}")


class PaginationError(ContribSieveError):
    """Link 헤더를 해석할 수 없다."""

    def __init__(self, header: str | None = None) -> None:
        self.header = header
        super().__init__("GitHub API pagination error")


class InvalidInputError(ContribSieveError, ValueError):
    """잘못된 입력값."""


class InvalidUsernameError(InvalidInputError):
    """사용할 수 없는 GitHub 사용자 이름."""

    def __init__(self, username: str) -> None:
        self.username = username
        super().__init__(f"Invalid username: {username!r}")
