"""Publishing — replicate content nodes into publication stores per locale."""

from fieldkit.publishing.models import (
    PublishInstruction,
    PublishMode,
    PublishOutcome,
    PublishRecord,
    ReplicatorConfig,
    SourceStore,
    TargetStore,
)
from fieldkit.publishing.replicator import PublishReplicator, ReplicatorState

__all__ = [
    "PublishInstruction",
    "PublishMode",
    "PublishOutcome",
    "PublishRecord",
    "PublishReplicator",
    "ReplicatorConfig",
    "ReplicatorState",
    "SourceStore",
    "TargetStore",
]
