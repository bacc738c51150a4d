"""wip_batch.services -- Snapshot runner and sinks."""

from wip_batch.services.runner import SnapshotRunner
from wip_batch.services.sinks import InMemorySnapshotSink, SnapshotSink

__all__ = ["InMemorySnapshotSink", "SnapshotRunner", "SnapshotSink"]
