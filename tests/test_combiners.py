import dataclasses
from typing import Any, List, Optional

from precisely import assert_that, equal_to, has_attrs, is_sequence

import batchjoin


@dataclasses.dataclass
class Document:
    created_by: Optional[int]
    updated_by: Optional[int] = None
    creator: Any = None
    updater: Any = None


@dataclasses.dataclass
class Page:
    items: Optional[List[Document]]


class UserCombiner(batchjoin.MultiCombiner[int, str]):
    def __init__(self, users):
        self._users = users
        self.calls: List[Any] = []

    def fetch(self, keys, context):
        self.calls.append((list(keys), context))
        return {key: self._users[key] for key in keys if key in self._users}


class StrictUserCombiner(UserCombiner):
    apply_on_miss = True


class PlainUserCombiner(batchjoin.Combiner[int, str]):
    def __init__(self, users):
        self._users = users
        self.calls: List[Any] = []

    def fetch(self, keys, context):
        self.calls.append((list(keys), context))
        return {key: self._users[key] for key in keys if key in self._users}


def _set_creator(document, user):
    document.creator = user


def _set_updater(document, user):
    document.updater = user


CREATOR = batchjoin.bind(lambda document: document.created_by, _set_creator)
UPDATER = batchjoin.bind(lambda document: document.updated_by, _set_updater)


def test_combiner_passes_context_to_fetch() -> None:
    combiner = PlainUserCombiner({1: "<user 1>"})
    documents = [Document(created_by=1)]

    combiner.combine(documents, lambda document: document.created_by, _set_creator, context="<tenant>")

    assert_that(combiner.calls, equal_to([([1], "<tenant>")]))
    assert_that(documents, is_sequence(has_attrs(creator="<user 1>")))


def test_combiner_passes_none_context_by_default() -> None:
    combiner = PlainUserCombiner({})

    combiner.combine([Document(created_by=1)], lambda document: document.created_by, _set_creator)

    assert_that(combiner.calls, equal_to([([1], None)]))


def test_combiner_single_and_container_forms() -> None:
    combiner = PlainUserCombiner({1: "<user 1>", 2: "<user 2>"})

    document = combiner.combine_one(Document(created_by=1), lambda document: document.created_by, _set_creator)
    page = combiner.combine_container(Page(items=[Document(created_by=2)]), lambda document: document.created_by, _set_creator)

    assert_that(document, has_attrs(creator="<user 1>"))
    assert_that(page.items, is_sequence(has_attrs(creator="<user 2>")))
    assert combiner.combine_one(None, lambda document: document.created_by, _set_creator) is None
    assert_that(len(combiner.calls), equal_to(2))


def test_combiner_container_without_items_does_not_fetch() -> None:
    combiner = PlainUserCombiner({})
    page = Page(items=[])

    assert combiner.combine_container(page, lambda document: document.created_by, _set_creator) is page
    assert combiner.combine_container(None, lambda document: document.created_by, _set_creator) is None
    assert_that(combiner.calls, equal_to([]))


def test_multi_combiner_resolves_all_bindings_with_one_fetch() -> None:
    combiner = UserCombiner({1: "<user 1>", 2: "<user 2>"})
    documents = [Document(created_by=1, updated_by=2), Document(created_by=2, updated_by=1)]

    combiner.combine_all(documents, [CREATOR, UPDATER], context="<trace>")

    assert_that(combiner.calls, equal_to([([1, 2], "<trace>")]))
    assert_that(documents, is_sequence(
        has_attrs(creator="<user 1>", updater="<user 2>"),
        has_attrs(creator="<user 2>", updater="<user 1>"),
    ))


def test_multi_combiner_combine_routes_through_a_single_binding() -> None:
    combiner = UserCombiner({1: "<user 1>"})
    documents = [Document(created_by=1)]

    combiner.combine(documents, lambda document: document.created_by, _set_creator)

    assert_that(documents, is_sequence(has_attrs(creator="<user 1>")))
    assert_that(len(combiner.calls), equal_to(1))


def test_multi_combiner_single_and_container_forms() -> None:
    combiner = UserCombiner({1: "<user 1>", 2: "<user 2>"})

    document = combiner.combine_all_one(Document(created_by=1, updated_by=2), [CREATOR, UPDATER])
    page = combiner.combine_all_container(Page(items=[Document(created_by=2, updated_by=2)]), [CREATOR, UPDATER])

    assert_that(document, has_attrs(creator="<user 1>", updater="<user 2>"))
    assert_that(page.items, is_sequence(has_attrs(creator="<user 2>", updater="<user 2>")))


def test_combiner_miss_policy_is_set_per_class() -> None:
    lenient = UserCombiner({})
    strict = StrictUserCombiner({})
    lenient_document = Document(created_by=1, creator="<old>")
    strict_document = Document(created_by=1, creator="<old>")

    lenient.combine_all_one(lenient_document, [CREATOR])
    strict.combine_all_one(strict_document, [CREATOR])

    assert_that(lenient_document.creator, equal_to("<old>"))
    assert_that(strict_document.creator, equal_to(None))


class DocumentEnricher(batchjoin.Enricher[Document]):
    def __init__(self, users: UserCombiner):
        self._users = users

    def enrich(self, elements):
        self._users.combine_all(elements, [CREATOR, UPDATER])


def test_enricher_forms_share_one_recipe() -> None:
    users = UserCombiner({1: "<user 1>", 2: "<user 2>"})
    enricher = DocumentEnricher(users)

    document = enricher.enrich_one(Document(created_by=1, updated_by=2))
    page = enricher.enrich_container(Page(items=[Document(created_by=2, updated_by=None)]))

    assert_that(document, has_attrs(creator="<user 1>", updater="<user 2>"))
    assert_that(page.items, is_sequence(has_attrs(creator="<user 2>", updater=None)))
    assert enricher.enrich_one(None) is None
    assert enricher.enrich_container(Page(items=None)).items is None
    assert_that(len(users.calls), equal_to(2))


def test_combiners_without_key_or_setter_do_nothing() -> None:
    multi = UserCombiner({1: "<user 1>"})
    plain = PlainUserCombiner({1: "<user 1>"})
    documents = [Document(created_by=1)]

    assert multi.combine(documents, None, _set_creator) is documents
    assert multi.combine(documents, lambda document: document.created_by, None) is documents
    assert plain.combine(documents, None, _set_creator) is documents
    assert plain.combine(documents, lambda document: document.created_by, None) is documents

    assert_that(multi.calls, equal_to([]))
    assert_that(plain.calls, equal_to([]))
    assert_that(documents, is_sequence(has_attrs(creator=None)))


def test_multi_combiner_skips_unusable_bindings() -> None:
    combiner = StrictUserCombiner({1: "<user 1>"})
    document = Document(created_by=1, updated_by=2, updater="<old>")

    combiner.combine_all_one(document, [CREATOR, batchjoin.bind(lambda document: document.updated_by, None), None])

    assert_that(combiner.calls, equal_to([([1], None)]))
    assert_that(document, has_attrs(creator="<user 1>", updater="<old>"))


class RecordingEnricher(batchjoin.Enricher[Document]):
    def __init__(self):
        self.batches: List[Any] = []

    def enrich(self, elements):
        self.batches.append(list(elements))


def test_enricher_is_not_called_for_missing_or_empty_input() -> None:
    enricher = RecordingEnricher()
    page = Page(items=[])

    assert enricher.enrich_one(None) is None
    assert enricher.enrich_container(None) is None
    assert enricher.enrich_container(page) is page
    assert enricher.enrich_container(Page(items=None)).items is None

    assert_that(enricher.batches, equal_to([]))
