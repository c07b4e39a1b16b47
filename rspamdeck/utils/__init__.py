"""Utility modules for rspamdeck."""

from rspamdeck.utils.alert_sink import Alert, AlertSink
from rspamdeck.utils.logging_config import setup_logging
from rspamdeck.utils.scheduler import AsyncioScheduler, Scheduler, TimerHandle

__all__ = [
    "Alert",
    "AlertSink",
    "AsyncioScheduler",
    "Scheduler",
    "TimerHandle",
    "setup_logging",
]
