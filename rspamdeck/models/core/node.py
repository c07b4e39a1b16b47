"""Cluster node models used by the scatter-gather engine."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True)
class NeighbourEndpoint:
    """Connection endpoint of one cluster member."""

    url: str
    host: str

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> NeighbourEndpoint:
        """Build an endpoint from a discovery entry."""
        return cls(url=str(raw.get("url", "")), host=str(raw.get("host", "")))


@dataclass
class ClusterNode:
    """Per-query observed state of one cluster member.

    ``checked`` flips to True once, when the node's request settles.
    ``status`` is True only when the request succeeded with a non-empty
    payload, in which case ``data`` holds that payload.
    """

    name: str
    url: str
    host: str
    checked: bool = False
    status: bool = False
    data: Any = field(default_factory=dict)
    error: Exception | None = None

    @classmethod
    def from_endpoint(cls, name: str, endpoint: NeighbourEndpoint) -> ClusterNode:
        return cls(name=name, url=endpoint.url, host=endpoint.host)

    def settle(self, *, status: bool, data: Any = None, error: Exception | None = None) -> None:
        """Record the final outcome of this node's request."""
        if self.checked:
            raise RuntimeError(f"Node {self.name} already settled")
        self.checked = True
        self.status = status
        if status:
            self.data = data
        self.error = error
