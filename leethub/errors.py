from typing import Optional


class LeetHubError(Exception):
    pass


class MissingCredentialError(LeetHubError):
    pass


class InvalidCommitRequest(LeetHubError):
    pass


class RemoteOperationError(LeetHubError):
    """A Git Data call failed, either in transport or with a non-2xx response."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class RefUpdateError(RemoteOperationError):
    pass
