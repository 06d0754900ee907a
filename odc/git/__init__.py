"""Git operations module.

Usage:
    from odc.git import Repository

    repo = Repository(Path("/path/to/plugin"))
    branch = repo.current_branch()
"""

from odc.git.repository import GitError, Repository

__all__ = [
    "GitError",
    "Repository",
]
