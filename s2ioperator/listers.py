"""Read-only listers over an object store, one per resource kind."""

from __future__ import annotations

from typing import Generic, Mapping, TypeVar, Union

from .builder_types import S2iBuilder
from .meta import (
    RESOURCE_PLURAL_S2I_BUILDER,
    RESOURCE_PLURAL_S2I_BUILDER_TEMPLATE,
    RESOURCE_PLURAL_S2I_RUN,
    RESOURCE_SINGULAR_S2I_BUILDER,
    RESOURCE_SINGULAR_S2I_BUILDER_TEMPLATE,
    RESOURCE_SINGULAR_S2I_RUN,
    SCHEME_GROUP_VERSION,
    GroupVersionResource,
    resource,
)
from .run_types import S2iRun
from .store import NotFoundError, ObjectStore, StoreError
from .template_types import S2iBuilderTemplate

T = TypeVar("T", S2iBuilder, S2iRun)

Selector = Union[Mapping[str, str], None]


def _get(store: ObjectStore, kind: type, singular: str, name: str, namespace: str = ""):
    try:
        return store.get(kind, name, namespace)
    except StoreError:
        raise NotFoundError(resource(singular), name) from None


class NamespaceLister(Generic[T]):
    """Lists and gets objects of one kind within a single namespace."""

    def __init__(self, store: ObjectStore, kind: type, singular: str, namespace: str) -> None:
        self._store = store
        self._kind = kind
        self._singular = singular
        self.namespace = namespace

    def list(self, selector: Selector = None) -> list[T]:
        """Objects in this namespace whose labels match ``selector``."""
        return self._store.list(self._kind, self.namespace, selector)

    def get(self, name: str) -> T:
        """The named object in this namespace, raising NotFoundError if absent."""
        if not self.namespace:
            raise NotFoundError(resource(self._singular), name)
        return _get(self._store, self._kind, self._singular, name, self.namespace)


class S2iBuilderLister:
    """Lists builders across namespaces and hands out per-namespace listers."""

    def __init__(self, store: ObjectStore) -> None:
        self._store = store

    def list(self, selector: Selector = None) -> list[S2iBuilder]:
        """Builders in every namespace whose labels match ``selector``."""
        return self._store.list(S2iBuilder, None, selector)

    def namespaced(self, namespace: str) -> NamespaceLister[S2iBuilder]:
        """A lister restricted to ``namespace``."""
        return NamespaceLister(self._store, S2iBuilder, RESOURCE_SINGULAR_S2I_BUILDER, namespace)


class S2iBuilderTemplateLister:
    """Lists and gets cluster-scoped builder templates."""

    def __init__(self, store: ObjectStore) -> None:
        self._store = store

    def list(self, selector: Selector = None) -> list[S2iBuilderTemplate]:
        """Templates whose labels match ``selector``."""
        return self._store.list(S2iBuilderTemplate, None, selector)

    def get(self, name: str) -> S2iBuilderTemplate:
        """The named template, raising NotFoundError if absent."""
        return _get(
            self._store, S2iBuilderTemplate, RESOURCE_SINGULAR_S2I_BUILDER_TEMPLATE, name
        )


class S2iRunLister:
    """Lists build runs across namespaces and hands out per-namespace listers."""

    def __init__(self, store: ObjectStore) -> None:
        self._store = store

    def list(self, selector: Selector = None) -> list[S2iRun]:
        """Runs in every namespace whose labels match ``selector``."""
        return self._store.list(S2iRun, None, selector)

    def namespaced(self, namespace: str) -> NamespaceLister[S2iRun]:
        """A lister restricted to ``namespace``."""
        return NamespaceLister(self._store, S2iRun, RESOURCE_SINGULAR_S2I_RUN, namespace)


AnyLister = Union[S2iBuilderLister, S2iBuilderTemplateLister, S2iRunLister]

_LISTERS = {
    SCHEME_GROUP_VERSION.with_resource(RESOURCE_PLURAL_S2I_BUILDER): S2iBuilderLister,
    SCHEME_GROUP_VERSION.with_resource(RESOURCE_PLURAL_S2I_BUILDER_TEMPLATE): S2iBuilderTemplateLister,
    SCHEME_GROUP_VERSION.with_resource(RESOURCE_PLURAL_S2I_RUN): S2iRunLister,
}


def lister_for_resource(store: ObjectStore, resource: GroupVersionResource) -> AnyLister:
    """The lister for a group/version/resource, raising LookupError if unknown."""
    lister_cls = _LISTERS.get(resource)
    if lister_cls is None:
        raise LookupError(f"no informer found for {resource}")
    return lister_cls(store)