"""rspamdeck - terminal admin console for clustered Rspamd deployments."""

__version__ = "0.1.0"
