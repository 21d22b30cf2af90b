"""In-memory stand-in for the Firestore client.

Mirrors the subset of the Firestore API the admin backend uses:
``store.collection(name).document(id)``, ``add``, single-condition ``where``
with an optional ``limit``, and ``get``. Reads and writes are coroutines so
callers are written exactly as against the async Firestore client, but every
operation completes without yielding, so no locking is needed.

Nothing is persisted; the data lives as long as the ``DocumentStore`` object.
"""

from __future__ import annotations

from collections.abc import Callable, Iterator, Mapping, Sequence
from copy import deepcopy
from dataclasses import dataclass
from enum import Enum
import itertools
import logging
import time
from typing import Any

LOGGER = logging.getLogger(__name__)


class UnsupportedQueryError(NotImplementedError):
    """Raised for Firestore query features the in-memory store does not emulate."""


class _Missing:
    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


MISSING: Any = _Missing()


class FieldOperator(str, Enum):
    EQ = "=="
    NEQ = "!="
    GT = ">"
    GTE = ">="
    LT = "<"
    LTE = "<="

    @classmethod
    def parse(cls, token: FieldOperator | str) -> FieldOperator | None:
        """Return the operator for ``token`` or None when it is not recognized."""
        if isinstance(token, FieldOperator):
            return token
        try:
            return cls(str(token))
        except ValueError:
            return None


def resolve_field_path(data: Any, field_path: str) -> Any:
    """Resolve a dotted path such as ``"meta.level"`` inside a document.

    Returns ``MISSING`` when a segment is absent or the walk reaches a scalar.
    A stored ``None`` is returned as ``None``.
    """

    current = data
    for segment in field_path.split("."):
        if isinstance(current, Mapping):
            if segment not in current:
                return MISSING
            current = current[segment]
        elif isinstance(current, Sequence) and not isinstance(current, (str, bytes)):
            if not (segment.isascii() and segment.isdecimal()):
                return MISSING
            index = int(segment)
            if index >= len(current):
                return MISSING
            current = current[index]
        else:
            return MISSING
    return current


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _strict_equals(left: Any, right: Any) -> bool:
    if isinstance(left, bool) or isinstance(right, bool):
        return isinstance(left, bool) and isinstance(right, bool) and left is right
    if _is_number(left) and _is_number(right):
        return left == right
    if type(left) is not type(right):
        return False
    return left == right


def _orderable(left: Any, right: Any) -> bool:
    if _is_number(left) and _is_number(right):
        return True
    return isinstance(left, str) and isinstance(right, str)


def _ordered(compare: Callable[[Any, Any], bool]) -> Callable[[Any, Any], bool]:
    def _evaluate(left: Any, right: Any) -> bool:
        return _orderable(left, right) and compare(left, right)

    return _evaluate


_COMPARATORS: dict[FieldOperator, Callable[[Any, Any], bool]] = {
    FieldOperator.EQ: _strict_equals,
    FieldOperator.NEQ: lambda left, right: not _strict_equals(left, right),
    FieldOperator.GT: _ordered(lambda left, right: left > right),
    FieldOperator.GTE: _ordered(lambda left, right: left >= right),
    FieldOperator.LT: _ordered(lambda left, right: left < right),
    FieldOperator.LTE: _ordered(lambda left, right: left <= right),
}


def evaluate_condition(operator: FieldOperator | None, field_value: Any, value: Any) -> bool:
    if operator is None or field_value is MISSING:
        return False
    return _COMPARATORS[operator](field_value, value)


@dataclass(frozen=True)
class FieldFilter:
    field_path: str
    operator: FieldOperator | None
    value: Any

    def matches(self, data: Mapping[str, Any]) -> bool:
        return evaluate_condition(self.operator, resolve_field_path(data, self.field_path), self.value)


class DocumentSnapshot:
    """Result of reading one document. ``to_dict()`` returns None when it does not exist."""

    def __init__(self, document_id: str, data: Mapping[str, Any] | None) -> None:
        self.id = document_id
        self._data = deepcopy(dict(data)) if data is not None else None

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> dict[str, Any] | None:
        if self._data is None:
            return None
        return deepcopy(self._data)

    def get(self, field_path: str, default: Any = None) -> Any:
        if self._data is None:
            return default
        value = resolve_field_path(self._data, field_path)
        return default if value is MISSING else deepcopy(value)

    def __repr__(self) -> str:
        return f"DocumentSnapshot(id={self.id!r}, exists={self.exists})"


class QuerySnapshot:
    def __init__(self, docs: list[DocumentSnapshot]) -> None:
        self.docs = docs

    @property
    def empty(self) -> bool:
        return not self.docs

    @property
    def size(self) -> int:
        return len(self.docs)

    def __iter__(self) -> Iterator[DocumentSnapshot]:
        return iter(self.docs)

    def __len__(self) -> int:
        return len(self.docs)


class Query:
    """Deferred single-condition filter over a collection."""

    def __init__(self, collection: CollectionReference, condition: FieldFilter | None = None) -> None:
        self._collection = collection
        self._condition = condition
        self._limit: int | None = None

    @property
    def condition(self) -> FieldFilter | None:
        return self._condition

    @property
    def limit_value(self) -> int | None:
        return self._limit

    def limit(self, count: int) -> Query:
        if isinstance(count, bool) or not isinstance(count, int) or count <= 0:
            raise ValueError(f"limit must be a positive integer: {count!r}")
        self._limit = count
        return self

    def where(self, field_path: str, op_string: FieldOperator | str, value: Any) -> Query:
        raise UnsupportedQueryError("Composite queries are not supported by the in-memory store.")

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> Query:
        raise UnsupportedQueryError("order_by is not supported by the in-memory store.")

    def _matching(self) -> list[tuple[str, dict[str, Any]]]:
        matched: list[tuple[str, dict[str, Any]]] = []
        for document_id, data in self._collection._documents.items():
            if self._condition is not None and not self._condition.matches(data):
                continue
            matched.append((document_id, data))
            if self._limit is not None and len(matched) >= self._limit:
                break
        return matched

    async def get(self) -> QuerySnapshot:
        return QuerySnapshot([DocumentSnapshot(document_id, data) for document_id, data in self._matching()])


class DocumentReference:
    def __init__(self, collection: CollectionReference, document_id: str) -> None:
        self._collection = collection
        self.id = document_id

    @property
    def parent(self) -> CollectionReference:
        return self._collection

    @property
    def path(self) -> str:
        return f"{self._collection.id}/{self.id}"

    async def set(self, document_data: Mapping[str, Any]) -> bool:
        """Replace the whole payload; the ``id`` key always mirrors the document id."""
        data = deepcopy(dict(document_data))
        data["id"] = self.id
        created = self._collection._documents.get(self.id) is None
        self._collection._documents[self.id] = data
        LOGGER.info(
            "MOCK: document %s %s in %s",
            self.id,
            "created" if created else "replaced",
            self._collection.id,
        )
        return True

    async def get(self) -> DocumentSnapshot:
        return DocumentSnapshot(self.id, self._collection._documents.get(self.id))

    async def update(self, field_updates: Mapping[str, Any]) -> bool:
        """Shallow-merge ``field_updates``. Returns False without writing when the document does not exist."""
        current = self._collection._documents.get(self.id)
        if current is None:
            LOGGER.debug("MOCK: update skipped, document %s not found in %s", self.id, self._collection.id)
            return False
        merged = {**current, **deepcopy(dict(field_updates))}
        merged["id"] = self.id
        self._collection._documents[self.id] = merged
        LOGGER.info("MOCK: document %s updated in %s", self.id, self._collection.id)
        return True

    async def delete(self) -> bool:
        existed = self._collection._documents.pop(self.id, None) is not None
        if existed:
            LOGGER.info("MOCK: document %s deleted from %s", self.id, self._collection.id)
        return existed


class CollectionReference:
    def __init__(self, store: DocumentStore, collection_id: str) -> None:
        self._store = store
        self.id = collection_id
        # Insertion order is the scan order of queries.
        self._documents: dict[str, dict[str, Any]] = {}

    def document(self, document_id: str | None = None) -> DocumentReference:
        if document_id is None:
            document_id = self._store._new_document_id(self)
        if not document_id or "/" in document_id:
            raise ValueError(f"Invalid document id: {document_id!r}")
        return DocumentReference(self, document_id)

    async def add(self, document_data: Mapping[str, Any]) -> DocumentReference:
        ref = self.document()
        await ref.set(document_data)
        return ref

    def where(self, field_path: str, op_string: FieldOperator | str, value: Any) -> Query:
        operator = FieldOperator.parse(op_string)
        if operator is None:
            LOGGER.warning("MOCK: unsupported operator %r on %s.%s; query matches nothing", op_string, self.id, field_path)
        return Query(self, FieldFilter(field_path=field_path, operator=operator, value=value))

    def limit(self, count: int) -> Query:
        return Query(self).limit(count)

    def order_by(self, field_path: str, direction: str = "ASCENDING") -> Query:
        raise UnsupportedQueryError("order_by is not supported by the in-memory store.")

    async def get(self) -> QuerySnapshot:
        return await Query(self).get()

    def __len__(self) -> int:
        return len(self._documents)


class DocumentStore:
    """Process-local document database. Create one and inject it where needed."""

    def __init__(self, *, clock: Callable[[], float] = time.time) -> None:
        self._collections: dict[str, CollectionReference] = {}
        self._counter = itertools.count(1)
        self._clock = clock

    def collection(self, name: str) -> CollectionReference:
        if not name or "/" in name:
            raise ValueError(f"Invalid collection name: {name!r}")
        collection = self._collections.get(name)
        if collection is None:
            collection = CollectionReference(self, name)
            self._collections[name] = collection
            LOGGER.debug("MOCK: collection %s created", name)
        return collection

    def collection_names(self) -> list[str]:
        return list(self._collections)

    def _new_document_id(self, collection: CollectionReference) -> str:
        while True:
            document_id = f"{_to_base36(int(self._clock() * 1000))}-{next(self._counter)}"
            if document_id not in collection._documents:
                return document_id


def _to_base36(value: int) -> str:
    digits = "0123456789abcdefghijklmnopqrstuvwxyz"
    if value <= 0:
        return "0"
    chars = []
    while value:
        value, remainder = divmod(value, 36)
        chars.append(digits[remainder])
    return "".join(reversed(chars))
