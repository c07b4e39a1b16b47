"""Navigation view state."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from rspamdeck.constants.enums import NavPhase, ViewId


@dataclass
class ViewState:
    """Navigation state owned by the navigation controller.

    ``active_timers`` never holds more than one entry: every dispatch clears
    it before the new view registers its poll.
    """

    active_view: ViewId = ViewId.STATUS
    active_timers: dict[ViewId, Any] = field(default_factory=dict)
    controls_disabled: set[ViewId] = field(default_factory=set)
    epoch: int = 0
    phase: NavPhase = NavPhase.IDLE

    def is_disabled(self, control: ViewId) -> bool:
        return control in self.controls_disabled
