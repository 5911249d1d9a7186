"""Access to the GitHub REST API, and an in-memory stand-in for tests."""

from .client import RestRemote
from .http import HttpClient, HttpError, MockHttpClient, RealHttpClient
from .memory import InMemoryRemote
from .remote import GitHubRemote, PullRequest, ReleaseDraft, RemoteCommit, RemoteRelease

__all__ = [
    # client
    "RestRemote",
    "InMemoryRemote",
    # http
    "HttpClient",
    "HttpError",
    "MockHttpClient",
    "RealHttpClient",
    # remote
    "GitHubRemote",
    "PullRequest",
    "ReleaseDraft",
    "RemoteCommit",
    "RemoteRelease",
]
