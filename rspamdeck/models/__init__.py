"""Data models for rspamdeck."""

from rspamdeck.models.core.node import ClusterNode, NeighbourEndpoint
from rspamdeck.models.state.app_settings import AppSettings
from rspamdeck.models.state.session import Session, SessionStore
from rspamdeck.models.state.view_state import ViewState

__all__ = [
    "AppSettings",
    "ClusterNode",
    "NeighbourEndpoint",
    "Session",
    "SessionStore",
    "ViewState",
]
