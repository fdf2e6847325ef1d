"""Immutable shape lookup table for one service + API version.

The shapes of a botocore model form a mutually-referential, possibly cyclic
graph.  Rather than linking shapes to each other, :class:`ShapeStore` keeps
them as a flat ``name -> Shape`` table; callers follow a reference by looking
its name up.  The extractor never goes more than one reference deep, so
cycles never matter.

The store is read-only once built and is shared by reference across every
concurrent extraction of the same service.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from types import MappingProxyType

from cmdschemas.exceptions import ShapeNotFoundError
from cmdschemas.models import ServiceModel, Shape


class ShapeStore(Mapping[str, Shape]):
    """Read-only mapping from shape name to :class:`~cmdschemas.models.Shape`.

    Args:
        shapes: The shape table to wrap.  It is copied, so later changes
            to the argument do not leak into the store.

    Example::

        store = ShapeStore.from_model(model)
        shape = store.lookup("RunInstancesRequest")
    """

    def __init__(self, shapes: Mapping[str, Shape]) -> None:
        self._shapes: Mapping[str, Shape] = MappingProxyType(dict(shapes))

    @classmethod
    def from_model(cls, model: ServiceModel) -> ShapeStore:
        """Build a store from a validated service model."""
        return cls(model.shapes)

    def lookup(self, name: str) -> Shape:
        """Return the shape called *name*.

        Raises:
            ShapeNotFoundError: If no shape has that name.
        """
        try:
            return self._shapes[name]
        except KeyError:
            raise ShapeNotFoundError(name) from None

    def __getitem__(self, name: str) -> Shape:
        return self._shapes[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._shapes)

    def __len__(self) -> int:
        return len(self._shapes)

    def __repr__(self) -> str:
        return f"ShapeStore({len(self._shapes)} shapes)"
