"""Git Operations Package"""

from commitsplit.git.helper import GitHelper, GitError, CommitCandidate, find_path_conflicts

__all__ = [
    "GitHelper",
    "GitError",
    "CommitCandidate",
    "find_path_conflicts",
]
