"""gitworkspace resource clients."""

from gitworkspace.clients.contents import ContentsClient
from gitworkspace.clients.git_data import GitDataClient
from gitworkspace.clients.pulls import PullsClient
from gitworkspace.clients.repos import ReposClient

__all__ = [
    "GitDataClient",
    "ContentsClient",
    "ReposClient",
    "PullsClient",
]
