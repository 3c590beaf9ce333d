"""Collected cluster data consumed by the evaluation engine."""

from kubesnoop.collector.snapshot import ClusterSnapshot, RBACSnapshot, resource_identifier

__all__ = [
    "ClusterSnapshot",
    "RBACSnapshot",
    "resource_identifier",
]
