"""Init file for cluster module."""

from rspamdeck.controllers.cluster.controller import ClusterController, NodeBarrier
from rspamdeck.controllers.cluster.fetchers import NeighbourFetcher, NodeFetcher

__all__ = ["ClusterController", "NeighbourFetcher", "NodeBarrier", "NodeFetcher"]
