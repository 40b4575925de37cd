"""Replicate a node from the authoring store into every publication store.

One publish instruction is built per (target store, source locale) pair.
Instructions for a target are submitted as a single batch, and targets
are processed one after another; a slow target delays those after it.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from datetime import UTC, datetime
from enum import StrEnum

from fieldkit.content.models import ContentNode
from fieldkit.publishing.models import (
    PublishInstruction,
    PublishMode,
    PublishOutcome,
    ReplicatorConfig,
    SourceStore,
    TargetStore,
)

logger = logging.getLogger(__name__)


class ReplicatorState(StrEnum):
    UNCONFIGURED = "unconfigured"
    SOURCE_SET = "source-set"
    READY = "ready"


class PublishReplicator:
    """Publishes nodes from a source store into a list of target stores.

    Configuration is expected to happen before publishing starts; the
    lock only guarantees that a publish sees one consistent config.
    """

    def __init__(
        self,
        config: ReplicatorConfig | None = None,
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self._config = config or ReplicatorConfig()
        self._lock = threading.Lock()
        self.clock = clock or (lambda: datetime.now(tz=UTC))

    # ── Configuration ────────────────────────────────────────────

    @property
    def config(self) -> ReplicatorConfig:
        with self._lock:
            return self._config

    @property
    def state(self) -> ReplicatorState:
        config = self.config
        if config.source is None:
            return ReplicatorState.UNCONFIGURED
        if config.is_ready:
            return ReplicatorState.READY
        return ReplicatorState.SOURCE_SET

    def set_source(self, store: SourceStore) -> None:
        """Set the source store once; later calls keep the first store."""
        with self._lock:
            if self._config.source is not None:
                return
            self._config = ReplicatorConfig(source=store, targets=self._config.targets)

    def set_targets(self, stores: Iterable[TargetStore]) -> None:
        """Replace the target store list wholesale."""
        with self._lock:
            self._config = ReplicatorConfig(source=self._config.source, targets=tuple(stores))

    # ── Publishing ───────────────────────────────────────────────

    def build_instructions(
        self,
        node: ContentNode,
        target: TargetStore,
        mode: PublishMode = PublishMode.SINGLE_ITEM,
        config: ReplicatorConfig | None = None,
    ) -> list[PublishInstruction]:
        """One instruction per source locale for ``target``."""
        config = config or self.config
        if config.source is None:
            return []
        timestamp = self.clock()
        return [
            PublishInstruction(
                source=config.source,
                target=target,
                mode=mode,
                locale=locale,
                timestamp=timestamp,
                root=node,
                deep=mode == PublishMode.SUBTREE,
                compare_revisions=True,
            )
            for locale in config.source.locales
        ]

    def publish(
        self,
        node: ContentNode | str,
        mode: PublishMode = PublishMode.SINGLE_ITEM,
    ) -> list[PublishOutcome]:
        """Publish ``node`` (or the node with that id) to every target store.

        Returns one outcome per target store; an empty list when the
        replicator is not fully configured or the id does not resolve.
        """
        config = self.config
        source = config.source
        if source is None or not config.targets:
            logger.debug("Replicator not configured (%s), nothing published", self.state)
            return []
        if isinstance(node, str):
            resolved = source.get(node)
            if resolved is None:
                logger.debug("Node %s not found in %s, nothing published", node, source.name)
                return []
            node = resolved

        outcomes: list[PublishOutcome] = []
        for target in config.targets:
            batch = self.build_instructions(node, target, mode, config)
            logger.info(
                "Publishing %s (%s) to %s in %d locale(s)",
                node.path,
                mode,
                target.name,
                len(batch),
            )
            outcomes.append(target.publish(batch))
        return outcomes
