"""Exception hierarchy for the download service."""


class DownloadListError(Exception):
    """Base class for all errors raised by the package."""


class NilDependencyError(DownloadListError, ValueError):
    """A required collaborator was not supplied."""

    def __init__(self, dependency: str) -> None:
        super().__init__(f"{dependency} is nil")
        self.dependency = dependency


class InvalidConfigError(DownloadListError, ValueError):
    """Configuration is missing or malformed."""


class BrokerConnectionError(DownloadListError, ConnectionError):
    """The message broker could not be reached."""