"""Exceptions raised while talking to an HDHomeRun DVR."""


class HdhrError(Exception):
    """Base class for all hdhr_cli errors."""


class DiscoveryError(HdhrError):
    """The discovery endpoint was unreachable or answered badly."""


class FetchError(HdhrError):
    """A recording or episode list could not be retrieved."""


class SizeQueryError(HdhrError):
    """The size of an episode could not be determined."""


class CommandError(HdhrError):
    """The DVR rejected a command (e.g. delete) for an episode."""
