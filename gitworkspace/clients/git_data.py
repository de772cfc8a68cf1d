"""Git data resource client: refs, blobs, trees and commits."""

import base64
import binascii
from typing import TYPE_CHECKING, Any
from urllib.parse import quote

from gitworkspace.exceptions import TransportError
from gitworkspace.types.git import CommitIdentity, GitCommit, GitRef, GitTree, TreeEntry

if TYPE_CHECKING:
    from gitworkspace.transport import HTTPTransport


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def _ref_path(ref: str) -> str:
    """Quote a ref for use in a URL, keeping the slashes of branch names."""
    return quote(ref.removeprefix("refs/"), safe="/")


def _decode_content(data: dict[str, Any]) -> bytes:
    """Decode the ``content`` of a blob or contents response."""
    content = data.get("content") or ""
    if data.get("encoding") != "base64":
        return content.encode("utf-8")
    try:
        return base64.b64decode(content)
    except binascii.Error as e:
        raise TransportError("MALFORMED_CONTENT", f"Content is not valid base64: {e}") from e


def _parse_ref(data: dict[str, Any]) -> GitRef:
    return GitRef(ref=data["ref"], sha=data["object"]["sha"])


def _parse_commit(data: dict[str, Any]) -> GitCommit:
    return GitCommit(
        sha=data["sha"],
        tree_sha=data["tree"]["sha"],
        parents=[p["sha"] for p in data.get("parents", [])],
        message=data.get("message", ""),
    )


def _parse_tree(data: dict[str, Any]) -> GitTree:
    return GitTree(
        sha=data["sha"],
        entries=[
            TreeEntry(
                path=item["path"],
                mode=item.get("mode", ""),
                type=item["type"],
                sha=item.get("sha"),
                size=item.get("size"),
            )
            for item in data.get("tree", [])
        ],
        truncated=bool(data.get("truncated", False)),
    )


class GitDataClient:
    """Client for the content-addressed object operations of a repository."""

    def __init__(self, transport: "HTTPTransport") -> None:
        """
        Initialize the git data client.

        Args:
            transport: HTTP transport for making requests
        """
        self.transport = transport

    def get_ref(self, owner: str, repo: str, ref: str) -> GitRef:
        """
        Read a single reference.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Reference without the leading "refs/" (e.g. "heads/main")

        Returns:
            GitRef with the commit sha it points to

        Raises:
            NotFoundError: If the reference does not exist
        """
        # The singular /git/ref/ endpoint matches exactly; /git/refs/ matches prefixes
        data = self.transport.get(f"{_repo_path(owner, repo)}/git/ref/{_ref_path(ref)}")
        return _parse_ref(data)

    def create_ref(self, owner: str, repo: str, ref: str, sha: str) -> GitRef:
        """
        Create a reference.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Fully qualified reference (e.g. "refs/heads/feature/x")
            sha: Commit the new reference points to

        Raises:
            ValidationError: If the reference already exists
        """
        data = self.transport.post(
            f"{_repo_path(owner, repo)}/git/refs",
            {"ref": ref, "sha": sha},
        )
        return _parse_ref(data)

    def update_ref(
        self,
        owner: str,
        repo: str,
        ref: str,
        sha: str,
        force: bool = False,
    ) -> GitRef:
        """
        Move a reference to a new commit.

        Without ``force`` the remote only accepts fast-forward updates.

        Args:
            owner: Repository owner
            repo: Repository name
            ref: Reference without the leading "refs/" (e.g. "heads/main")
            sha: New target commit
            force: Allow non fast-forward updates

        Raises:
            ValidationError: If the update is not a fast-forward
        """
        data = self.transport.patch(
            f"{_repo_path(owner, repo)}/git/refs/{_ref_path(ref)}",
            {"sha": sha, "force": force},
        )
        return _parse_ref(data)

    def get_tree(
        self, owner: str, repo: str, tree_ish: str, recursive: bool = True
    ) -> GitTree:
        """
        Read a tree by sha, branch name or commit sha.

        Args:
            owner: Repository owner
            repo: Repository name
            tree_ish: Tree sha, commit sha or branch name
            recursive: List nested entries as well

        Raises:
            NotFoundError: If the tree cannot be resolved
        """
        params = {"recursive": "1"} if recursive else None
        data = self.transport.get(
            f"{_repo_path(owner, repo)}/git/trees/{quote(tree_ish, safe='/')}",
            params=params,
        )
        return _parse_tree(data)

    def create_tree(
        self,
        owner: str,
        repo: str,
        entries: list[TreeEntry],
        base_tree: str | None = None,
    ) -> str:
        """
        Create a tree, optionally layered on top of an existing one.

        Returns:
            sha of the new tree
        """
        body: dict[str, Any] = {
            "tree": [
                {"path": e.path, "mode": e.mode, "type": e.type, "sha": e.sha}
                for e in entries
            ],
        }
        if base_tree:
            body["base_tree"] = base_tree

        data = self.transport.post(f"{_repo_path(owner, repo)}/git/trees", body)
        return data["sha"]

    def create_blob(self, owner: str, repo: str, content: bytes) -> str:
        """
        Store raw content as a blob.

        Content is always sent base64-encoded so binary files survive.

        Returns:
            sha of the blob
        """
        data = self.transport.post(
            f"{_repo_path(owner, repo)}/git/blobs",
            {
                "content": base64.b64encode(content).decode("ascii"),
                "encoding": "base64",
            },
        )
        return data["sha"]

    def get_blob(self, owner: str, repo: str, sha: str) -> bytes:
        """Read the raw content of a blob."""
        data = self.transport.get(f"{_repo_path(owner, repo)}/git/blobs/{sha}")
        return _decode_content(data)

    def get_commit(self, owner: str, repo: str, sha: str) -> GitCommit:
        """
        Read a commit object.

        Raises:
            NotFoundError: If the commit does not exist
        """
        data = self.transport.get(f"{_repo_path(owner, repo)}/git/commits/{sha}")
        return _parse_commit(data)

    def create_commit(
        self,
        owner: str,
        repo: str,
        message: str,
        tree: str,
        parents: list[str],
        author: CommitIdentity | None = None,
        committer: CommitIdentity | None = None,
    ) -> GitCommit:
        """
        Create a commit object. The commit is not reachable until a ref
        points at it.
        """
        body: dict[str, Any] = {
            "message": message,
            "tree": tree,
            "parents": parents,
        }
        if author is not None:
            body["author"] = author.as_dict()
        if committer is not None:
            body["committer"] = committer.as_dict()

        data = self.transport.post(f"{_repo_path(owner, repo)}/git/commits", body)
        return _parse_commit(data)
