"""Publishing data types: modes, instructions, outcomes, replicator config."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from dataclasses import dataclass, field
from datetime import datetime
from enum import StrEnum
from typing import Protocol

from pydantic import BaseModel, Field

from fieldkit.content.models import ContentNode


class PublishMode(StrEnum):
    """How much of the tree a publish covers."""

    SINGLE_ITEM = "single-item"
    SUBTREE = "subtree"


class SourceStore(Protocol):
    """Authoring store the replicator reads from."""

    name: str

    @property
    def locales(self) -> list[str]: ...

    def get(self, node_id: str, locale: str | None = None) -> ContentNode | None: ...

    def descendants(self, node_id: str, locale: str | None = None) -> Iterator[ContentNode]: ...


class TargetStore(Protocol):
    """Publication store; its ``publish`` is the publish engine."""

    name: str

    def publish(self, instructions: Sequence[PublishInstruction]) -> PublishOutcome: ...


@dataclass(frozen=True)
class PublishInstruction:
    """One unit of replication work for a (target store, locale) pair."""

    source: SourceStore
    target: TargetStore
    mode: PublishMode
    locale: str
    timestamp: datetime
    root: ContentNode
    deep: bool = False
    compare_revisions: bool = True


class PublishRecord(BaseModel):
    """A node version touched by a publish."""

    node_id: str
    path: str
    locale: str
    revision: str = ""


class PublishOutcome(BaseModel):
    """What one target store did with a batch of instructions."""

    target: str
    instructions: int = 0
    published: list[PublishRecord] = Field(default_factory=list)
    skipped: list[PublishRecord] = Field(default_factory=list)


@dataclass(frozen=True)
class ReplicatorConfig:
    """Source store plus the target stores it replicates into."""

    source: SourceStore | None = None
    targets: tuple[TargetStore, ...] = field(default_factory=tuple)

    @property
    def is_ready(self) -> bool:
        return self.source is not None and len(self.targets) > 0
