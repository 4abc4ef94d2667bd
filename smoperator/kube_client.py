"""An in-memory Kubernetes object store and a client that fails on demand."""

from __future__ import annotations

import copy
import itertools
import uuid
from collections.abc import Iterable
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

_OPERATIONS = {
    "get": "Get",
    "list": "List",
    "create": "Create",
    "update": "Update",
    "update_status": "UpdateStatus",
    "delete": "Delete",
}


@dataclass(frozen=True)
class NamespacedName:
    """The namespace and name that identify an object."""

    namespace: str
    name: str

    def __str__(self) -> str:
        return f"{self.namespace}/{self.name}"


class KubeClientError(Exception):
    """Raised when a client operation fails."""


class NotFoundError(KubeClientError, LookupError):
    """Raised when the requested object does not exist."""


def _key_of(obj: Any) -> NamespacedName:
    return NamespacedName(namespace=obj.metadata.namespace, name=obj.metadata.name)


def _now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


class InMemoryKubeClient:
    """Stores objects by namespace and name, following API server rules.

    Status changes are only taken by ``update_status``; ``update`` keeps the
    stored status. The generation goes up when the spec changes. Deleting an
    object that carries finalizers only marks it with a deletion timestamp;
    it is removed once an update leaves it without finalizers.
    """

    def __init__(self) -> None:
        self._objects: dict[NamespacedName, Any] = {}
        self._versions = itertools.count(1)

    def _next_version(self) -> str:
        return str(next(self._versions))

    def _lookup(self, key: NamespacedName, kind: str | None = None) -> Any:
        stored = self._objects.get(key)
        if stored is None or (kind is not None and stored.kind != kind):
            raise NotFoundError(f'{kind or "object"} "{key}" not found')
        return stored

    def get(self, key: NamespacedName) -> Any:
        return self._lookup(key).deep_copy()

    def list(self, kind: str) -> list[Any]:
        return [obj.deep_copy() for obj in self._objects.values() if obj.kind == kind]

    def create(self, obj: Any) -> None:
        key = _key_of(obj)
        if not key.name:
            raise KubeClientError("object name must not be empty")
        if key in self._objects:
            raise KubeClientError(f'{obj.kind} "{key}" already exists')
        stored = obj.deep_copy()
        meta = stored.metadata
        meta.uid = str(uuid.uuid4())
        meta.resource_version = self._next_version()
        meta.generation = 1
        meta.creation_timestamp = _now()
        meta.deletion_timestamp = None
        if hasattr(stored, "status"):
            stored.status = type(stored.status)()
            obj.status = copy.deepcopy(stored.status)
        self._objects[key] = stored
        obj.metadata = meta.deep_copy()

    def update(self, obj: Any) -> None:
        key = _key_of(obj)
        stored = self._lookup(key, obj.kind)
        updated = obj.deep_copy()
        meta, old = updated.metadata, stored.metadata
        meta.uid = old.uid
        meta.creation_timestamp = old.creation_timestamp
        meta.deletion_timestamp = old.deletion_timestamp
        spec_changed = getattr(updated, "spec", None) != getattr(stored, "spec", None)
        meta.generation = old.generation + (1 if spec_changed else 0)
        meta.resource_version = self._next_version()
        if hasattr(stored, "status"):
            updated.status = copy.deepcopy(stored.status)
        obj.metadata = meta.deep_copy()
        if meta.deletion_timestamp is not None and not meta.finalizers:
            del self._objects[key]
        else:
            self._objects[key] = updated

    def update_status(self, obj: Any) -> None:
        key = _key_of(obj)
        stored = self._lookup(key, obj.kind)
        stored.status = copy.deepcopy(obj.status)
        stored.metadata.resource_version = self._next_version()
        obj.metadata.resource_version = stored.metadata.resource_version

    def delete(self, obj: Any) -> None:
        key = _key_of(obj)
        stored = self._lookup(key, obj.kind)
        if stored.metadata.finalizers:
            if stored.metadata.deletion_timestamp is None:
                stored.metadata.deletion_timestamp = _now()
                stored.metadata.resource_version = self._next_version()
        else:
            del self._objects[key]


class FailingKubeClient:
    """Wraps a client and raises on the named operations.

    ``fail_on`` names operations among get, list, create, update,
    update_status and delete; all others are passed to ``actual``.
    """

    def __init__(self, actual: Any, fail_on: Iterable[str]) -> None:
        failing = frozenset(fail_on)
        unknown = failing - _OPERATIONS.keys()
        if unknown:
            raise ValueError(f"unknown operations: {', '.join(sorted(unknown))}")
        self.actual = actual
        self.fail_on = failing

    def _check(self, operation: str) -> None:
        if operation in self.fail_on:
            raise KubeClientError(f"unable to {_OPERATIONS[operation]}")

    def get(self, key: NamespacedName) -> Any:
        self._check("get")
        return self.actual.get(key)

    def list(self, kind: str) -> list[Any]:
        self._check("list")
        return self.actual.list(kind)

    def create(self, obj: Any) -> None:
        self._check("create")
        self.actual.create(obj)

    def update(self, obj: Any) -> None:
        self._check("update")
        self.actual.update(obj)

    def update_status(self, obj: Any) -> None:
        self._check("update_status")
        self.actual.update_status(obj)

    def delete(self, obj: Any) -> None:
        self._check("delete")
        self.actual.delete(obj)