from __future__ import annotations

ACTIVE_DIRECTORY_CONNECTION_MESSAGE = "Unable to connect to Active Directory."


class DirectoryError(Exception):
    """Base class for errors raised by ad_helper."""


class DirectoryAccessError(DirectoryError):
    """A search against the directory failed.

    The message is the fixed connection prefix followed by the message of the
    underlying ldap3 error, which is kept as ``__cause__``.
    """

    def __init__(self, detail: str) -> None:
        self.detail = detail
        super().__init__(f"{ACTIVE_DIRECTORY_CONNECTION_MESSAGE}\n\n{detail}")


class HostResolutionError(DirectoryError):
    def __init__(self, hostname: str) -> None:
        self.hostname = hostname
        super().__init__(f"Unable to resolve host name '{hostname}'")


class SearcherClosedError(DirectoryError):
    pass
