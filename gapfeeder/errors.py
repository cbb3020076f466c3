from __future__ import annotations


class GapFeederError(RuntimeError):
    """Base class for every failure that aborts a run."""


class NoGapFilesError(GapFeederError):
    """No file in the gap directory matched the glob.

    An empty monitoring window is a normal operating condition, so this is
    reported without a traceback and mapped to its own exit status.
    """

    def __init__(self, directory: str, pattern: str) -> None:
        super().__init__(
            f"Couldn't find any .gap files in {directory} matching {pattern}, aborting"
        )
        self.directory = directory
        self.pattern = pattern


class ConfigurationError(GapFeederError):
    pass


class LocatorError(GapFeederError):
    pass


class CompressionError(GapFeederError):
    pass


class CounterFileError(GapFeederError):
    pass


class TransportLaunchError(GapFeederError):
    pass
