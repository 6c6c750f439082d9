"""An in-memory object store for builders, builder templates and build runs."""

from __future__ import annotations

import copy
import threading
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Mapping, Union

from .builder_types import S2iBuilder
from .meta import (
    RESOURCE_KIND_S2I_BUILDER,
    RESOURCE_KIND_S2I_BUILDER_TEMPLATE,
    RESOURCE_KIND_S2I_RUN,
    RESOURCE_PLURAL_S2I_BUILDER,
    RESOURCE_PLURAL_S2I_BUILDER_TEMPLATE,
    RESOURCE_PLURAL_S2I_RUN,
    GroupResource,
    resource,
)
from .run_types import S2iRun
from .template_types import S2iBuilderTemplate

StoredObject = Union[S2iBuilder, S2iBuilderTemplate, S2iRun]


class StoreError(Exception):
    """An operation on the store failed."""


class NotFoundError(StoreError):
    """The requested object does not exist."""

    def __init__(self, group_resource: GroupResource, name: str) -> None:
        super().__init__(f'{group_resource} "{name}" not found')
        self.group_resource = group_resource
        self.name = name


class AlreadyExistsError(StoreError):
    """An object with the same key already exists."""

    def __init__(self, group_resource: GroupResource, name: str) -> None:
        super().__init__(f'{group_resource} "{name}" already exists')
        self.group_resource = group_resource
        self.name = name


@dataclass(frozen=True)
class _KindInfo:
    cls: type
    kind: str
    plural: str
    namespaced: bool

    @property
    def group_resource(self) -> GroupResource:
        return resource(self.plural)


_KINDS = (
    _KindInfo(S2iBuilder, RESOURCE_KIND_S2I_BUILDER, RESOURCE_PLURAL_S2I_BUILDER, True),
    _KindInfo(
        S2iBuilderTemplate,
        RESOURCE_KIND_S2I_BUILDER_TEMPLATE,
        RESOURCE_PLURAL_S2I_BUILDER_TEMPLATE,
        False,
    ),
    _KindInfo(S2iRun, RESOURCE_KIND_S2I_RUN, RESOURCE_PLURAL_S2I_RUN, True),
)


def _kind_info(kind: Any) -> _KindInfo:
    for info in _KINDS:
        if kind is info.cls or kind == info.kind or kind == info.plural:
            return info
    raise StoreError(f"unknown kind {kind!r}")


def _kind_of(obj: Any) -> _KindInfo:
    for info in _KINDS:
        if type(obj) is info.cls:
            return info
    raise StoreError(f"cannot store object of type {type(obj).__name__}")


def _now() -> str:
    return datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%SZ")


def _matches(labels: Mapping[str, str], selector: Mapping[str, str] | None) -> bool:
    if not selector:
        return True
    return all(labels.get(key) == value for key, value in selector.items())


class ObjectStore:
    """Keeps objects by kind, namespace and name; hands out copies only."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._objects: dict[tuple[str, str, str], StoredObject] = {}
        self._version = 0

    def _next_version(self) -> str:
        self._version += 1
        return str(self._version)

    def _key(self, info: _KindInfo, name: str, namespace: str | None) -> tuple[str, str, str]:
        if not name:
            raise StoreError("name is required")
        ns = (namespace or "") if info.namespaced else ""
        if info.namespaced and not ns:
            raise StoreError(f"namespace is required for {info.plural}")
        return (info.kind, ns, name)

    def create(self, obj: StoredObject) -> StoredObject:
        """Store a new object; fills in its version and creation time."""
        info = _kind_of(obj)
        key = self._key(info, obj.metadata.name, obj.metadata.namespace)
        with self._lock:
            if key in self._objects:
                raise AlreadyExistsError(info.group_resource, obj.metadata.name)
            if not info.namespaced:
                obj.metadata.namespace = ""
            obj.metadata.resource_version = self._next_version()
            if not obj.metadata.creation_timestamp:
                obj.metadata.creation_timestamp = _now()
            self._objects[key] = copy.deepcopy(obj)
            return copy.deepcopy(obj)

    def get(self, kind: Any, name: str, namespace: str | None = "") -> StoredObject:
        """Return a copy of the stored object, raising NotFoundError if absent."""
        info = _kind_info(kind)
        key = self._key(info, name, namespace) if name else None
        with self._lock:
            if key is None or key not in self._objects:
                raise NotFoundError(info.group_resource, name)
            return copy.deepcopy(self._objects[key])

    def update(self, obj: StoredObject) -> StoredObject:
        """Replace a stored object; its status is replaced as well."""
        info = _kind_of(obj)
        key = self._key(info, obj.metadata.name, obj.metadata.namespace)
        with self._lock:
            current = self._objects.get(key)
            if current is None:
                raise NotFoundError(info.group_resource, obj.metadata.name)
            if not info.namespaced:
                obj.metadata.namespace = ""
            obj.metadata.creation_timestamp = current.metadata.creation_timestamp
            obj.metadata.resource_version = self._next_version()
            self._objects[key] = copy.deepcopy(obj)
            return copy.deepcopy(obj)

    def update_status(self, obj: StoredObject) -> StoredObject:
        """Replace only the status of a stored object and return the result."""
        info = _kind_of(obj)
        key = self._key(info, obj.metadata.name, obj.metadata.namespace)
        with self._lock:
            current = self._objects.get(key)
            if current is None:
                raise NotFoundError(info.group_resource, obj.metadata.name)
            stored = copy.deepcopy(current)
            if hasattr(obj, "status"):
                stored.status = copy.deepcopy(obj.status)
            stored.metadata.resource_version = self._next_version()
            obj.metadata.resource_version = stored.metadata.resource_version
            self._objects[key] = stored
            return copy.deepcopy(stored)

    def delete(self, kind: Any, name: str, namespace: str | None = "") -> None:
        """Remove an object, raising NotFoundError if absent."""
        info = _kind_info(kind)
        key = self._key(info, name, namespace) if name else None
        with self._lock:
            if key is None or key not in self._objects:
                raise NotFoundError(info.group_resource, name)
            del self._objects[key]

    def delete_collection(self, kind: Any, namespace: str | None = None) -> int:
        """Remove every object of a kind, in one namespace or all; return the count."""
        info = _kind_info(kind)
        with self._lock:
            doomed = [
                key
                for key in self._objects
                if key[0] == info.kind and (not namespace or key[1] == namespace)
            ]
            for key in doomed:
                del self._objects[key]
            return len(doomed)

    def list(
        self,
        kind: Any,
        namespace: str | None = None,
        selector: Mapping[str, str] | None = None,
    ) -> list[StoredObject]:
        """Copies of the objects of a kind whose labels match ``selector``.

        An empty namespace lists all namespaces. Results are ordered by
        namespace, then name.
        """
        info = _kind_info(kind)
        with self._lock:
            found = [
                copy.deepcopy(obj)
                for (k, ns, _), obj in self._objects.items()
                if k == info.kind
                and (not namespace or not info.namespaced or ns == namespace)
                and _matches(obj.metadata.labels, selector)
            ]
        found.sort(key=lambda o: (o.metadata.namespace, o.metadata.name))
        return found