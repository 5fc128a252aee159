import logging
from typing import Any, Callable, Hashable, Iterable, List, Mapping, Optional, TypeVar


logger = logging.getLogger(__name__)


E = TypeVar("E")
T = TypeVar("T")
V = TypeVar("V")
K = TypeVar("K", bound=Hashable)
D = TypeVar("D")


KeyExtractor = Callable[[E], Optional[K]]
BatchFetch = Callable[..., Optional[Mapping[K, D]]]
Setter = Callable[[T, Optional[D]], None]
Converter = Callable[[E], V]


class _NoContext:
    def __repr__(self) -> str:
        return "NO_CONTEXT"


NO_CONTEXT: Any = _NoContext()


def distinct_keys(keys: Iterable[Optional[K]]) -> List[K]:
    # First-seen order, None dropped.
    return list(dict.fromkeys(key for key in keys if key is not None))


def call_fetch(fetch: BatchFetch, keys: List[K], context: Any) -> Mapping[K, D]:
    logger.debug("fetching %d distinct key(s) with %r", len(keys), fetch)

    if context is NO_CONTEXT:
        result = fetch(keys)
    else:
        result = fetch(keys, context)

    if result is None:
        return {}
    return result
