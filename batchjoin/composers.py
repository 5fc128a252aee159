"""
Batch joins over lists of elements.

Every composer follows the same steps: extract a key from each element,
drop ``None`` keys and duplicates, call the fetch function once with what
is left, then hand each element its data through the setter. Elements
keep their order, and when ``convert`` is given the setter is applied to
the converted views instead, which are returned in place of the input.
"""

import logging
from typing import Any, Callable, Hashable, List, Mapping, Optional, Sequence, TypeVar

from ._keys import NO_CONTEXT, BatchFetch, Converter, KeyExtractor, Setter, call_fetch, distinct_keys
from .binding import Binding


logger = logging.getLogger(__name__)


E = TypeVar("E")
C = TypeVar("C")
K = TypeVar("K", bound=Hashable)
L = TypeVar("L", bound=Hashable)
D = TypeVar("D")


def compose(
    elements: Optional[Sequence[E]],
    key: Optional[KeyExtractor],
    fetch: Optional[BatchFetch],
    setter: Optional[Setter],
    *,
    convert: Optional[Converter] = None,
    apply_on_miss: bool = False,
    context: Any = NO_CONTEXT,
):
    """
    Join one attribute per element against a single batch fetch.

    ``fetch`` receives the distinct non-``None`` keys as a list and returns a
    mapping from key to data. Keys it leaves out, or maps to ``None``, are
    misses: the setter is not called for them unless ``apply_on_miss`` is
    set, in which case it is called with ``None``.
    """
    if not elements:
        return _empty(elements, convert)

    if key is None or fetch is None or setter is None:
        return _project(elements, convert)

    keys = distinct_keys(key(element) for element in elements)
    if not keys:
        logger.debug("no keys to fetch for %d element(s)", len(elements))
        return _project(elements, convert)

    found = call_fetch(fetch, keys, context)

    def visit(element, target):
        _apply(target, key(element), found, setter, apply_on_miss)

    return _walk(elements, convert, visit)


def compose_multi(
    elements: Optional[Sequence[E]],
    fetch: Optional[BatchFetch],
    bindings: Optional[Sequence[Optional[Binding]]],
    *,
    apply_on_miss: bool = False,
    context: Any = NO_CONTEXT,
):
    """
    Join several attribute slots of the same data type against one fetch.

    The keys of every binding across every element go into a single
    request. Each binding is then resolved on its own against the shared
    result, so a miss on one slot never affects another.
    """
    if not elements or fetch is None or not bindings:
        return elements

    live_bindings = [
        binding
        for binding in bindings
        if binding is not None and binding.key is not None and binding.setter is not None
    ]
    if not live_bindings:
        return elements

    keys = distinct_keys(
        binding.extract(element)
        for binding in live_bindings
        for element in elements
    )
    if not keys:
        logger.debug("no keys to fetch for %d element(s) across %d binding(s)", len(elements), len(live_bindings))
        return elements

    found = call_fetch(fetch, keys, context)

    for element in elements:
        for binding in live_bindings:
            _apply(element, binding.extract(element), found, binding.setter, apply_on_miss)

    return elements


def compose_many(
    elements: Optional[Sequence[E]],
    key: Optional[KeyExtractor],
    fetch_lists: Optional[Callable[..., Optional[Mapping[K, Sequence[D]]]]],
    setter: Optional[Callable[[Any, List[D]], None]],
    *,
    convert: Optional[Converter] = None,
    context: Any = NO_CONTEXT,
):
    """
    One-to-many join: ``fetch_lists`` maps each key to a list of data.

    Elements whose key is missing from the result are left alone. Each
    element gets its own copy of the list.
    """
    if not elements:
        return _empty(elements, convert)

    if key is None or fetch_lists is None or setter is None:
        return _project(elements, convert)

    keys = distinct_keys(key(element) for element in elements)
    if not keys:
        logger.debug("no keys to fetch for %d element(s)", len(elements))
        return _project(elements, convert)

    found = call_fetch(fetch_lists, keys, context)

    def visit(element, target):
        element_key = key(element)
        if element_key is None:
            return

        related = found.get(element_key)
        if related is not None:
            setter(target, list(related))

    return _walk(elements, convert, visit)


def compose_via(
    elements: Optional[Sequence[E]],
    key: Optional[KeyExtractor],
    fetch_links: Optional[Callable[..., Optional[Mapping[K, Sequence[L]]]]],
    fetch_data: Optional[Callable[..., Optional[Mapping[L, D]]]],
    setter: Optional[Callable[[Any, List[D]], None]],
    *,
    convert: Optional[Converter] = None,
    context: Any = NO_CONTEXT,
):
    """
    Many-to-many join through a junction.

    ``fetch_links`` maps each key to the link keys of its related rows, and
    ``fetch_data`` maps link keys to the rows themselves. Both are called at
    most once, the second with the union of every element's link keys. Each
    element receives its rows in the order of its link keys, with link keys
    that found no row dropped.
    """
    if not elements:
        return _empty(elements, convert)

    if key is None or fetch_links is None or fetch_data is None or setter is None:
        return _project(elements, convert)

    keys = distinct_keys(key(element) for element in elements)
    if not keys:
        logger.debug("no keys to fetch for %d element(s)", len(elements))
        return _project(elements, convert)

    links = call_fetch(fetch_links, keys, context)

    link_keys = distinct_keys(
        link_key
        for element_links in links.values()
        if element_links
        for link_key in element_links
    )
    if link_keys:
        found = call_fetch(fetch_data, link_keys, context)
    else:
        logger.debug("no link keys returned for %d key(s)", len(keys))
        found = {}

    def visit(element, target):
        element_key = key(element)
        if element_key is None:
            return

        element_links = links.get(element_key)
        if element_links is None:
            return

        setter(target, [
            found[link_key]
            for link_key in element_links
            if link_key is not None and found.get(link_key) is not None
        ])

    return _walk(elements, convert, visit)


def compose_children(
    elements: Optional[Sequence[E]],
    children: Optional[Callable[[E], Optional[Sequence[C]]]],
    child_key: Optional[KeyExtractor],
    fetch: Optional[BatchFetch],
    child_setter: Optional[Setter],
    *,
    apply_on_miss: bool = False,
    context: Any = NO_CONTEXT,
):
    """
    Join the children embedded in each element, with one fetch for all of
    them. Elements without children are skipped.
    """
    if not elements or children is None or child_key is None or fetch is None or child_setter is None:
        return elements

    keys = distinct_keys(
        child_key(child)
        for element in elements
        for child in children(element) or ()
    )
    if not keys:
        logger.debug("no child keys to fetch for %d element(s)", len(elements))
        return elements

    found = call_fetch(fetch, keys, context)

    for element in elements:
        for child in children(element) or ():
            _apply(child, child_key(child), found, child_setter, apply_on_miss)

    return elements


def compose_join(
    elements: Optional[Sequence[E]],
    key: Optional[KeyExtractor],
    related: Optional[Sequence[D]],
    related_key: Optional[Callable[[D], Any]],
    setter: Optional[Setter],
    *,
    convert: Optional[Converter] = None,
    apply_on_miss: bool = False,
):
    """
    Join against data that is already in memory. Each element takes the
    first item of ``related`` whose key equals its own.
    """
    if not elements:
        return _empty(elements, convert)

    if key is None or related_key is None or setter is None:
        return _project(elements, convert)

    candidates = related or ()

    def visit(element, target):
        element_key = key(element)
        if element_key is None:
            return

        match = next(
            (candidate for candidate in candidates if element_key == related_key(candidate)),
            None,
        )
        if match is not None or apply_on_miss:
            setter(target, match)

    return _walk(elements, convert, visit)


def attach(
    element: Optional[E],
    key: Optional[KeyExtractor],
    lookup: Optional[Callable[[K], Optional[D]]],
    setter: Optional[Setter],
    *,
    convert: Optional[Converter] = None,
):
    """
    Enrich a single element through a per-key ``lookup``, such as a
    ``get_by_id`` call, rather than a batch fetch.
    """
    if element is None:
        return None

    target = element if convert is None else convert(element)

    if key is None or lookup is None or setter is None:
        return target

    element_key = key(element)
    if element_key is None:
        return target

    data = lookup(element_key)
    if data is not None:
        setter(target, data)

    return target


def attach_many(
    element: Optional[E],
    key: Optional[KeyExtractor],
    lookup_list: Optional[Callable[[K], Optional[List[D]]]],
    setter: Optional[Callable[[Any, List[D]], None]],
    *,
    convert: Optional[Converter] = None,
):
    """
    Like ``attach``, for a lookup returning a list. The setter receives its
    own copy of the list, as with ``compose_many``.
    """
    if setter is None:
        return attach(element, key, lookup_list, None, convert=convert)

    def set_copy(target, related):
        setter(target, list(related))

    return attach(element, key, lookup_list, set_copy, convert=convert)


def _empty(elements, convert):
    if convert is None:
        return elements
    return []


def _project(elements, convert):
    if convert is None:
        return elements
    return [convert(element) for element in elements]


def _walk(elements, convert, visit):
    if convert is None:
        for element in elements:
            visit(element, element)
        return elements

    views = []
    for element in elements:
        view = convert(element)
        visit(element, view)
        views.append(view)
    return views


def _apply(target, element_key, found, setter, apply_on_miss):
    if element_key is None:
        return

    data = found.get(element_key)
    if data is not None or apply_on_miss:
        setter(target, data)
