"""Navigation domain: view dispatch, polling and view actions."""

from rspamdeck.controllers.navigation.controller import NavigationController
from rspamdeck.controllers.navigation.views import ViewActions, ViewBinding, ViewContext

__all__ = ["NavigationController", "ViewActions", "ViewBinding", "ViewContext"]
