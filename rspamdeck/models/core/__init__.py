"""Core cluster models."""

from rspamdeck.models.core.node import ClusterNode, NeighbourEndpoint

__all__ = ["ClusterNode", "NeighbourEndpoint"]
