"""fieldkit — typed content fields, link resolution and multi-locale publishing.

Field reads are total: a missing or malformed field yields a typed
default and a diagnostic, never an exception.  Publishing replicates a
node from an authoring store into every publication store, once per
locale, skipping node versions whose revision already matches.
"""

from fieldkit.content import ContentNode, ContentStore
from fieldkit.diagnostics import CollectingSink, Diagnostic, DiagnosticLevel, LoggingSink, NullSink
from fieldkit.fields import FieldResolver, NumberFormat
from fieldkit.publishing import PublishMode, PublishReplicator, ReplicatorConfig

__version__ = "0.1.0"

__all__ = [
    "CollectingSink",
    "ContentNode",
    "ContentStore",
    "Diagnostic",
    "DiagnosticLevel",
    "FieldResolver",
    "LoggingSink",
    "NullSink",
    "NumberFormat",
    "PublishMode",
    "PublishReplicator",
    "ReplicatorConfig",
    "__version__",
]
