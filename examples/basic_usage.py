#!/usr/bin/env python3
"""
Basic gitworkspace usage example.

Runs offline against the in-memory remote from gitworkspace.testing:
checkout, read, commit, and the errors a caller should expect.
"""

import logging

from gitworkspace import (
    FileChange,
    ProtectedBranchError,
    RepositoryHandle,
    RepositoryWorkspace,
    configure_logging,
)
from gitworkspace.testing import FakeGitHubClient

configure_logging(level=logging.INFO)

print("=== gitworkspace Basic Usage Example ===\n")

remote = FakeGitHubClient()
remote.seed_repository("octo", "demo", {"README.md": "old\n", "src/app.py": "print('hi')\n"})
handle = RepositoryHandle("octo", "demo", base_branch="main", protected_branches={"main"})
repo = RepositoryWorkspace(remote, handle)

# 1. Protected branches are refused before any remote call
print("1. Committing to a protected branch:")
try:
    repo.write_file("main", "README.md", "new\n", "Update readme")
except ProtectedBranchError as e:
    print(f"   Caught ProtectedBranchError: {e}")

# 2. A feature branch is created from main on first use
print("\n2. Committing two files to feature/readme:")
attempt = repo.commit_files(
    "feature/readme",
    [
        FileChange("README.md", "new\n"),
        {"path": "docs/usage.md", "content": "Run the app.\n"},
    ],
    "Update readme and add usage notes",
)
print(f"   Commit {attempt.commit_sha} on top of {attempt.parent_sha}")

# 3. Reads are per branch; missing files are reported, not raised
print("\n3. Reading files:")
for branch in ("main", "feature/readme"):
    results = repo.read_files(branch, ["README.md", "docs/usage.md"])
    for path, result in results.items():
        shown = result.text.strip() if result.found and result.text else f"<{result.error_code}>"
        print(f"   {branch}:{path} -> {shown}")

# 4. Directory listings treat absence as empty
print("\n4. Listing directories on feature/readme:")
repo.workspace.checkout("feature/readme")
print(f"   docs/ -> {repo.reader.list_directory('docs').files}")
print(f"   nope/ -> empty={repo.reader.list_directory('nope').is_empty}")

# 5. Pull requests are opened once per branch
print("\n5. Opening a pull request twice:")
first = repo.create_pull_request("feature/readme", "Update readme")
second = repo.create_pull_request("feature/readme", "Update readme")
print(f"   #{first.number} created={first.created}; #{second.number} created={second.created}")

print("\n=== Example completed! ===")
