"""Controllers module for rspamdeck.

This module provides domain-driven controllers for querying the Rspamd
cluster, managing the session and driving navigation.
"""

from __future__ import annotations

# Base classes
from rspamdeck.controllers.base import BaseController, HttpControllerMixin, QueryResult

# Cluster domain
from rspamdeck.controllers.cluster.controller import ClusterController, NodeBarrier

# Console context
from rspamdeck.controllers.console.controller import ConsoleController

# Navigation domain
from rspamdeck.controllers.navigation import NavigationController, ViewActions

# Session domain
from rspamdeck.controllers.session import SessionController

__all__ = [
    # Base
    "BaseController",
    # Domain Controllers
    "ClusterController",
    "ConsoleController",
    "HttpControllerMixin",
    "NavigationController",
    "NodeBarrier",
    "QueryResult",
    "SessionController",
    "ViewActions",
]
