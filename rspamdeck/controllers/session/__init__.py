"""Session domain: credential lifecycle."""

from rspamdeck.controllers.session.controller import SessionController, validate_password

__all__ = ["SessionController", "validate_password"]
