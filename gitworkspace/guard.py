"""Protected-branch precondition check."""

from collections.abc import Iterable

from gitworkspace.exceptions import ProtectedBranchError


class ProtectedBranchGuard:
    """
    Rejects writes to a configured deny list of branch names.

    Matching is exact and case-sensitive: "Main" is not "main". The check
    never consults the remote.
    """

    def __init__(self, protected_branches: Iterable[str] = ()) -> None:
        self.protected_branches = frozenset(protected_branches)

    def is_protected(self, branch: str) -> bool:
        return branch in self.protected_branches

    def check(self, branch: str) -> None:
        """
        Raises:
            ProtectedBranchError: If ``branch`` is on the deny list
        """
        if self.is_protected(branch):
            raise ProtectedBranchError(branch)
