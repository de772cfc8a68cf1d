#!/usr/bin/env python3
"""
gitworkspace - Complete Agent Workflow Example

Runs against a real GitHub repository:
1. Create a working branch from the base branch
2. Read the files an agent wants to change
3. Commit the edits as one atomic commit
4. Open (or reuse) a pull request

Environment variables:
    GITHUB_TOKEN, GITWORKSPACE_OWNER, GITWORKSPACE_REPO (required)
    GITWORKSPACE_BASE_BRANCH, GITWORKSPACE_PROTECTED_BRANCHES (optional)
"""

import logging
import random
import string
import sys

from gitworkspace import (
    AmbiguousCommitOutcomeError,
    RepositoryWorkspace,
    StaleBranchError,
    WorkspaceError,
    configure_logging,
)


def generate_random_suffix(length: int = 6) -> str:
    """Generate a random alphanumeric suffix."""
    return "".join(random.choices(string.ascii_lowercase + string.digits, k=length))


def main() -> None:
    """Run the complete agent workflow example."""
    configure_logging(level=logging.INFO, http_level=logging.WARNING)
    print("=== gitworkspace Agent Workflow Example ===\n")

    branch = f"agent/notes-{generate_random_suffix()}"

    with RepositoryWorkspace.from_env() as repo:
        # Step 1: Branches
        print(f"1. Working on {repo.handle.full_name}, branch '{branch}'")
        print(f"   Existing branches: {', '.join(repo.list_branches())}")

        # Step 2: Read
        print("\n2. Reading README.md...")
        readme = repo.read_files(branch, ["README.md"])["README.md"]
        if readme.found:
            print(f"   {len(readme.content or b'')} bytes")
        else:
            print(f"   Not found ({readme.error_code}); starting from scratch")

        # Step 3: Commit
        print("\n3. Committing changes...")
        text = readme.text or ""
        try:
            attempt = repo.commit_files(
                branch,
                [
                    {"path": "README.md", "content": text + "\nEdited by an agent.\n"},
                    {"path": "AGENT_NOTES.md", "content": "# Notes\n\nNothing yet.\n"},
                ],
                "Add agent notes",
            )
            print(f"   Commit: {attempt.commit_sha}")
        except StaleBranchError as e:
            print(f"   Branch moved underneath us; re-read and retry: {e}")
            return
        except AmbiguousCommitOutcomeError as e:
            applied = repo.workspace.head_sha(branch) == e.commit_sha
            print(f"   Outcome unknown at first; applied={applied}")
            if not applied:
                return

        # Step 4: Pull request
        print("\n4. Opening pull request...")
        pull = repo.create_pull_request(branch, "Add agent notes", "Opened by the example script")
        state = "opened" if pull.created else "reused"
        print(f"   #{pull.number} {state}: {pull.html_url}")

    print("\n=== Example completed successfully! ===")


if __name__ == "__main__":
    try:
        main()
    except WorkspaceError as e:
        print(f"\nError: {e}")
        sys.exit(1)
