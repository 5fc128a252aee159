"""
Reusable combiners: write the batch fetch for a data type once, then
enrich any element type that refers to it by supplying only a key and a
setter.

    class UserCombiner(batchjoin.Combiner[int, User]):
        def __init__(self, *, session):
            self._session = session

        def fetch(self, keys, context):
            return users_by_id(self._session, keys)

    UserCombiner(session=session).combine(orders, key=..., setter=...)
"""

import abc
from typing import Any, Generic, Hashable, List, Mapping, Optional, Sequence, TypeVar

from .binding import Binding
from .composers import compose, compose_multi
from .conveniences import Container, _contained, _one


E = TypeVar("E")
T = TypeVar("T")
K = TypeVar("K", bound=Hashable)
D = TypeVar("D")


class Combiner(abc.ABC, Generic[K, D]):
    apply_on_miss = False

    @abc.abstractmethod
    def fetch(self, keys: List[K], context: Any) -> Optional[Mapping[K, D]]:
        pass

    def combine(self, elements: Optional[Sequence[E]], key, setter, *, context: Any = None):
        return compose(
            elements,
            key,
            self.fetch,
            setter,
            apply_on_miss=self.apply_on_miss,
            context=context,
        )

    def combine_one(self, element: Optional[E], key, setter, *, context: Any = None) -> Optional[E]:
        return _one(self.combine, element, key, setter, context=context)

    def combine_container(self, container: Optional[Container[E]], key, setter, *, context: Any = None):
        return _contained(self.combine, container, key, setter, context=context)


class MultiCombiner(Combiner[K, D]):
    """
    A combiner that can fill several slots of the same data type with one
    fetch, e.g. both the creator and the updater of a document.
    """

    def combine(self, elements: Optional[Sequence[E]], key, setter, *, context: Any = None):
        return self.combine_all(elements, [Binding(key=key, setter=setter)], context=context)

    def combine_all(self, elements: Optional[Sequence[E]], bindings: Sequence[Binding], *, context: Any = None):
        return compose_multi(
            elements,
            self.fetch,
            bindings,
            apply_on_miss=self.apply_on_miss,
            context=context,
        )

    def combine_all_one(self, element: Optional[E], bindings: Sequence[Binding], *, context: Any = None) -> Optional[E]:
        return _one(self.combine_all, element, bindings, context=context)

    def combine_all_container(self, container: Optional[Container[E]], bindings: Sequence[Binding], *, context: Any = None):
        return _contained(self.combine_all, container, bindings, context=context)


class Enricher(abc.ABC, Generic[T]):
    @abc.abstractmethod
    def enrich(self, elements: List[T]) -> None:
        pass

    def enrich_one(self, element: Optional[T]) -> Optional[T]:
        return _one(self._enriched, element)

    def enrich_container(self, container: Optional[Container[T]]):
        return _contained(self._enriched, container)

    def _enriched(self, elements: List[T]) -> List[T]:
        self.enrich(elements)
        return elements
