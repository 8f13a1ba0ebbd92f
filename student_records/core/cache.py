"""
Read-through cache used by the service layer.

Each entity gets its own region (``students``, ``groups``, ``subjects``,
``marks``, ``student_subjects``). A region is a string-keyed TTLCache with
explicit put/evict; nothing is invalidated automatically apart from the TTL,
so every write path in the services evicts the keys it makes stale.

Values are Pydantic schemas, never ORM instances: a cached object must stay
valid after the session that loaded it is closed.
"""
import logging
import threading
from typing import Any, Callable, Dict, Iterable, List, Optional

from cachetools import TTLCache

from student_records.core.config import settings

logger = logging.getLogger(__name__)

STUDENTS = "students"
GROUPS = "groups"
SUBJECTS = "subjects"
MARKS = "marks"
STUDENT_SUBJECTS = "student_subjects"

REGIONS = (STUDENTS, GROUPS, SUBJECTS, MARKS, STUDENT_SUBJECTS)

_MISSING = object()


def is_empty(value: Any) -> bool:
    """Default "unless" policy: None and empty collections are not cached."""
    if value is None:
        return True
    if isinstance(value, (list, tuple, set, frozenset, dict)):
        return len(value) == 0
    return False


class CacheRegion:
    """One namespace of cache keys backed by a thread-safe TTLCache."""

    def __init__(self, name: str, maxsize: int, ttl: float):
        self.name = name
        self._store = TTLCache(maxsize=maxsize, ttl=ttl)
        self._lock = threading.RLock()

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._store

    def __len__(self) -> int:
        with self._lock:
            return len(self._store)

    def keys(self) -> List[str]:
        with self._lock:
            return list(self._store.keys())

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._store.get(key, default)

    def put(self, key: str, value: Any) -> None:
        with self._lock:
            self._store[key] = value
        logger.debug("Cache put %s::%s", self.name, key)

    def evict(self, *keys: str) -> None:
        with self._lock:
            for key in keys:
                self._store.pop(key, None)
        logger.debug("Cache evict %s::%s", self.name, ", ".join(keys))

    def evict_prefix(self, prefix: str) -> int:
        """Wildcard eviction: drop every key starting with ``prefix``."""
        with self._lock:
            matched = [key for key in self._store.keys() if key.startswith(prefix)]
            for key in matched:
                self._store.pop(key, None)
        logger.debug("Cache evict %s::%s* (%d keys)", self.name, prefix, len(matched))
        return len(matched)

    def clear(self) -> None:
        with self._lock:
            self._store.clear()
        logger.debug("Cache clear %s", self.name)

    def read_through(
        self,
        key: str,
        loader: Callable[[], Any],
        unless: Optional[Callable[[Any], bool]] = is_empty,
    ) -> Any:
        """
        Return the cached value for ``key`` or load, store and return it.

        ``unless`` decides which loaded values are not worth keeping; by
        default None and empty collections are returned but never cached.
        Exceptions raised by ``loader`` propagate and leave the region as is.
        """
        value = self.get(key, _MISSING)
        if value is not _MISSING:
            logger.debug("Cache hit %s::%s", self.name, key)
            return value

        logger.debug("Cache miss %s::%s", self.name, key)
        value = loader()
        if unless is None or not unless(value):
            self.put(key, value)
        return value


class CacheManager:
    """Registry of the named cache regions."""

    def __init__(
        self,
        names: Iterable[str] = REGIONS,
        maxsize: int = 1024,
        ttl: float = 600,
    ):
        self._regions: Dict[str, CacheRegion] = {
            name: CacheRegion(name, maxsize=maxsize, ttl=ttl) for name in names
        }

    def region(self, name: str) -> CacheRegion:
        try:
            return self._regions[name]
        except KeyError:
            raise KeyError(f"Unknown cache region: {name}") from None

    def clear(self, *names: str) -> None:
        """Clear the given regions, or all of them when none are named."""
        for name in names or self._regions.keys():
            self.region(name).clear()


cache_manager = CacheManager(
    maxsize=settings.CACHE_MAX_ENTRIES,
    ttl=settings.CACHE_TTL_SECONDS,
)
