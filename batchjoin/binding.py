import dataclasses
from typing import Callable, Generic, Hashable, Optional, TypeVar


E = TypeVar("E")
K = TypeVar("K", bound=Hashable)
D = TypeVar("D")


@dataclasses.dataclass(frozen=True)
class Binding(Generic[E, K, D]):
    """
    One attribute slot: where to read the key from, and where to put the
    data found for it.

    Several bindings over the same data type can share a single fetch, for
    instance ``created_by_id``/``set_creator`` and ``updated_by_id``/``set_updater``
    both resolved against a users-by-id lookup.
    """

    key: Callable[[E], Optional[K]]
    setter: Callable[[E, Optional[D]], None]

    def extract(self, element: E) -> Optional[K]:
        return self.key(element)

    def apply(self, target: E, data: Optional[D]) -> None:
        self.setter(target, data)


def bind(key: Callable[[E], Optional[K]], setter: Callable[[E, Optional[D]], None]) -> Binding[E, K, D]:
    return Binding(key=key, setter=setter)
