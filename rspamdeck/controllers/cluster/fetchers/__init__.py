"""Fetchers for cluster controller."""

from rspamdeck.controllers.cluster.fetchers.neighbour_fetcher import NeighbourFetcher
from rspamdeck.controllers.cluster.fetchers.node_fetcher import NodeFetcher

__all__ = ["NeighbourFetcher", "NodeFetcher"]
