from ._keys import NO_CONTEXT, BatchFetch, Converter, KeyExtractor, Setter
from .binding import Binding, bind
from .combiners import Combiner, Enricher, MultiCombiner
from .composers import (
    attach,
    attach_many,
    compose,
    compose_children,
    compose_join,
    compose_many,
    compose_multi,
    compose_via,
)
from .conveniences import (
    Container,
    compose_children_container,
    compose_children_one,
    compose_container,
    compose_join_container,
    compose_join_one,
    compose_many_container,
    compose_many_one,
    compose_multi_container,
    compose_multi_one,
    compose_one,
    compose_via_container,
    compose_via_one,
)


__all__ = [
    "NO_CONTEXT",
    "BatchFetch",
    "Converter",
    "KeyExtractor",
    "Setter",
    "Binding",
    "bind",
    "Combiner",
    "Enricher",
    "MultiCombiner",
    "attach",
    "attach_many",
    "compose",
    "compose_children",
    "compose_join",
    "compose_many",
    "compose_multi",
    "compose_via",
    "Container",
    "compose_children_container",
    "compose_children_one",
    "compose_container",
    "compose_join_container",
    "compose_join_one",
    "compose_many_container",
    "compose_many_one",
    "compose_multi_container",
    "compose_multi_one",
    "compose_one",
    "compose_via_container",
    "compose_via_one",
]
