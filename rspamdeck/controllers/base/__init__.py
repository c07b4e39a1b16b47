"""Base controller classes."""

from rspamdeck.controllers.base.base_controller import (
    BaseController,
    HttpControllerMixin,
    QueryResult,
)

__all__ = ["BaseController", "HttpControllerMixin", "QueryResult"]
