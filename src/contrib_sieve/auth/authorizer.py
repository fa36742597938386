"""GitHub OAuth 인증 모듈."""

import base64
import logging
import secrets
from urllib.parse import quote

import httpx

from contrib_sieve.auth.location import Location
from contrib_sieve.exceptions import AuthorizationError
from contrib_sieve.sources.http import fetch_json
from contrib_sieve.storage.base import ACCESS_TOKEN_KEY, STATE_KEY, KeyValueStore

logger = logging.getLogger(__name__)

STATE_BYTES = 32


def generate_state() -> str:
    """CSRF 방지용 state 문자열을 생성한다."""
    return base64.b64encode(secrets.token_bytes(STATE_BYTES)).decode("ascii")


class Authorizer:
    """OAuth authorization code 흐름을 처리한다.

    상태 전이:
        Unauthenticated -> AwaitingRedirect   (state 저장 후 리다이렉트)
        AwaitingRedirect -> AwaitingToken     (code, state를 받고 돌아옴)
        AwaitingToken -> Authorized           (게이트웨이에서 token 교환)
        Authorized -> Unauthenticated         (401 응답 시 invalidate)

    client secret을 브라우저에 노출하지 않기 위해 code 교환은
    GitHub가 아닌 게이트웨이를 거친다.
    """

    def __init__(
        self,
        store: KeyValueStore,
        location: Location,
        client_id: str,
        gateway_url: str,
        web_url: str = "https://github.com",
        http_client: httpx.AsyncClient | None = None,
        timeout: float = 10.0,
    ) -> None:
        """
        Args:
            store: access token과 state 저장소
            location: 현재 위치 (code, state 쿼리 파라미터를 담는다)
            client_id: OAuth App client ID
            gateway_url: code를 token으로 교환하는 게이트웨이 URL
            web_url: GitHub 웹 기본 URL
            http_client: 사용할 HTTP 클라이언트. None이면 요청마다 생성한다.
            timeout: HTTP 요청 타임아웃 (초)
        """
        self.store = store
        self.location = location
        self.client_id = client_id
        self.gateway_url = gateway_url
        self.web_url = web_url.rstrip("/")
        self.http_client = http_client
        self.timeout = timeout

    @property
    def token(self) -> str | None:
        """저장된 access token."""
        return self.store.get(ACCESS_TOKEN_KEY)

    def invalidate(self) -> None:
        """저장된 access token을 삭제한다."""
        logger.info("Invalidating stored access token")
        self.store.delete(ACCESS_TOKEN_KEY)

    def authorization_url(self, state: str) -> str:
        """GitHub 인증 페이지 URL을 생성한다."""
        return (
            f"{self.web_url}/login/oauth/authorize"
            f"?client_id={quote(self.client_id, safe='')}"
            f"&state={quote(state, safe='')}"
            f"&redirect_uri={quote(self.location.url, safe='')}"
        )

    def token_url(self, code: str) -> str:
        """게이트웨이 token 교환 URL을 생성한다."""
        return (
            f"{self.gateway_url}?client_id={quote(self.client_id, safe='')}"
            f"&code={quote(code, safe='')}"
        )

    async def authorize(self) -> str | None:
        """access token을 반환한다.

        저장된 token이 있으면 바로 반환한다. code가 없으면 인증 페이지로
        리다이렉트하고 None을 반환한다. code가 있으면 state를 검증한 뒤
        token으로 교환해 저장한다.

        Raises:
            AuthorizationError: state 검증 실패 또는 token 교환 실패
            FetchError: 게이트웨이 요청 실패
        """
        token = self.token
        if token:
            return token

        code = self.location.get_param("code")
        if not code:
            self._request_authorization()
            return None

        try:
            self._check_state(self.location.get_param("state"))
            token = await self._exchange_code(code)
        finally:
            # 결과와 관계없이 사용한 파라미터는 URL에서 지운다
            self.location.delete_param("code")
            self.location.delete_param("state")

        self.store.set(ACCESS_TOKEN_KEY, token)
        logger.info("Authorization completed")
        return token

    def _request_authorization(self) -> None:
        self.invalidate()
        state = generate_state()
        self.store.set(STATE_KEY, state)
        self.location.redirect(self.authorization_url(state))

    def _check_state(self, received: str | None) -> None:
        if not received:
            raise AuthorizationError("missing state")

        expected = self.store.get(STATE_KEY)
        # state는 한 번만 사용한다
        self.store.delete(STATE_KEY)
        if not expected or not secrets.compare_digest(
            expected.encode(), received.encode()
        ):
            logger.warning("OAuth state mismatch")
            raise AuthorizationError("unknown state")

    async def _exchange_code(self, code: str) -> str:
        url = self.token_url(code)
        if self.http_client is not None:
            data = await fetch_json(self.http_client, url, raise_unauthorized=False)
        else:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                data = await fetch_json(client, url, raise_unauthorized=False)

        token = data.get("access_token") if isinstance(data, dict) else None
        if not token or data.get("error"):
            logger.error(f"Token exchange failed: {data!r}")
            raise AuthorizationError("unable to get access token")
        return str(token)
