"""OAuth 인증 모듈."""

from contrib_sieve.auth.authorizer import Authorizer, generate_state
from contrib_sieve.auth.location import Location, UrlLocation

__all__ = ["Authorizer", "Location", "UrlLocation", "generate_state"]
