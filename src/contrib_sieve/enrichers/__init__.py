"""검색 결과 enrichment 모듈."""

from contrib_sieve.enrichers.repository import RepositoryEnricher, repository_api_url

__all__ = ["RepositoryEnricher", "repository_api_url"]
