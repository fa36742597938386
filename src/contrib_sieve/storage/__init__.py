"""토큰 저장소 모듈."""

from contrib_sieve.storage.base import ACCESS_TOKEN_KEY, STATE_KEY, KeyValueStore
from contrib_sieve.storage.file import JsonFileStore
from contrib_sieve.storage.memory import MemoryStore

__all__ = [
    "ACCESS_TOKEN_KEY",
    "STATE_KEY",
    "JsonFileStore",
    "KeyValueStore",
    "MemoryStore",
]
