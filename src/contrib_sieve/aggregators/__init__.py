"""집계 모듈."""

from contrib_sieve.aggregators.repository import aggregate, build_search_url, is_external

__all__ = ["aggregate", "build_search_url", "is_external"]
