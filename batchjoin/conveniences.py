"""
Single-element and container forms of the list composers.

``*_one`` wraps an element in a list and returns the element (or its view);
``*_container`` composes ``container.items`` and returns the container.
The combiner classes reuse the same two helpers.
"""

from typing import Any, List, Optional, Protocol, TypeVar

from ._keys import NO_CONTEXT
from .composers import compose, compose_children, compose_join, compose_many, compose_multi, compose_via


T = TypeVar("T")


class Container(Protocol[T]):
    items: Optional[List[T]]


def _one(composer, element, *args, **kwargs):
    if element is None:
        return None
    return composer([element], *args, **kwargs)[0]


def _contained(composer, container, *args, **kwargs):
    if container is not None and container.items:
        composer(container.items, *args, **kwargs)
    return container


def compose_one(element, key, fetch, setter, *, convert=None, apply_on_miss=False, context: Any = NO_CONTEXT):
    return _one(compose, element, key, fetch, setter, convert=convert, apply_on_miss=apply_on_miss, context=context)


def compose_container(container, key, fetch, setter, *, apply_on_miss=False, context: Any = NO_CONTEXT):
    return _contained(compose, container, key, fetch, setter, apply_on_miss=apply_on_miss, context=context)


def compose_multi_one(element, fetch, bindings, *, apply_on_miss=False, context: Any = NO_CONTEXT):
    return _one(compose_multi, element, fetch, bindings, apply_on_miss=apply_on_miss, context=context)


def compose_multi_container(container, fetch, bindings, *, apply_on_miss=False, context: Any = NO_CONTEXT):
    return _contained(compose_multi, container, fetch, bindings, apply_on_miss=apply_on_miss, context=context)


def compose_many_one(element, key, fetch_lists, setter, *, convert=None, context: Any = NO_CONTEXT):
    return _one(compose_many, element, key, fetch_lists, setter, convert=convert, context=context)


def compose_many_container(container, key, fetch_lists, setter, *, context: Any = NO_CONTEXT):
    return _contained(compose_many, container, key, fetch_lists, setter, context=context)


def compose_via_one(element, key, fetch_links, fetch_data, setter, *, convert=None, context: Any = NO_CONTEXT):
    return _one(compose_via, element, key, fetch_links, fetch_data, setter, convert=convert, context=context)


def compose_via_container(container, key, fetch_links, fetch_data, setter, *, context: Any = NO_CONTEXT):
    return _contained(compose_via, container, key, fetch_links, fetch_data, setter, context=context)


def compose_children_one(element, children, child_key, fetch, child_setter, *, apply_on_miss=False, context: Any = NO_CONTEXT):
    return _one(compose_children, element, children, child_key, fetch, child_setter, apply_on_miss=apply_on_miss, context=context)


def compose_children_container(container, children, child_key, fetch, child_setter, *, apply_on_miss=False, context: Any = NO_CONTEXT):
    return _contained(compose_children, container, children, child_key, fetch, child_setter, apply_on_miss=apply_on_miss, context=context)


def compose_join_one(element, key, related, related_key, setter, *, convert=None, apply_on_miss=False):
    return _one(compose_join, element, key, related, related_key, setter, convert=convert, apply_on_miss=apply_on_miss)


def compose_join_container(container, key, related, related_key, setter, *, apply_on_miss=False):
    return _contained(compose_join, container, key, related, related_key, setter, apply_on_miss=apply_on_miss)
