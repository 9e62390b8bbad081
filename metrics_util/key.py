"""Metric keys, labels, composite keys and stable key hashing."""

from __future__ import annotations

import hashlib
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from typing import Any, Union

from .kind import MetricKind

__all__ = ["Label", "Key", "CompositeKey", "key_hash"]


def key_hash(value: Any) -> int:
    """Return a stable unsigned 64-bit hash of ``value``, based on its repr."""
    digest = hashlib.blake2b(repr(value).encode("utf-8"), digest_size=8).digest()
    return int.from_bytes(digest, "little")


@dataclass(frozen=True, order=True)
class Label:
    """A key/value pair attached to a metric key."""

    key: str
    value: str


LabelLike = Union[Label, "tuple[str, str]"]


def _to_label(item: LabelLike) -> Label:
    if isinstance(item, Label):
        return item
    key, value = item
    return Label(str(key), str(value))


@dataclass(frozen=True, order=True)
class Key:
    """A metric identifier: a name plus an ordered set of labels."""

    name: str
    labels: tuple[Label, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "labels", tuple(_to_label(item) for item in self.labels))

    @classmethod
    def from_name(cls, name: str) -> Key:
        """Create a key with no labels."""
        return cls(str(name))

    @classmethod
    def from_parts(
        cls, name: str, labels: Iterable[LabelLike] | Mapping[str, str]
    ) -> Key:
        """Create a key from a name and labels (labels, pairs or a mapping)."""
        if isinstance(labels, Mapping):
            labels = labels.items()
        return cls(str(name), tuple(_to_label(item) for item in labels))

    def hashable(self) -> int:
        """The stable 64-bit hash of this key."""
        return key_hash((self.name, tuple((label.key, label.value) for label in self.labels)))


@dataclass(frozen=True, order=True)
class CompositeKey:
    """A metric key together with the kind of metric it names."""

    kind: MetricKind
    key: Key

    def into_parts(self) -> tuple[MetricKind, Key]:
        """Return the kind and key as a pair."""
        return self.kind, self.key