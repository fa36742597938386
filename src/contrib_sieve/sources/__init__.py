"""GitHub API 데이터 소스 모듈."""

from contrib_sieve.sources.http import build_headers, fetch, fetch_json
from contrib_sieve.sources.pager import SearchPager, parse_link_header

__all__ = ["SearchPager", "build_headers", "fetch", "fetch_json", "parse_link_header"]
