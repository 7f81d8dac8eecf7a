"""Exceptions raised by the sync core."""


class LeadSyncError(RuntimeError):
    """Base class for errors raised while syncing or resolving leads."""


class UpstreamError(LeadSyncError):
    """Raised when a reporting API call fails or returns an unknown envelope."""


class SyncAbortedError(LeadSyncError):
    """Raised when a run cannot continue, e.g. the database is unreachable."""


class UnknownChannelError(LeadSyncError, ValueError):
    """Raised when a channel name does not match any known sync channel."""
