"""Split Session - Spend selections on commits until no files remain."""

from typing import Optional

from commitsplit.git import CommitCandidate
from commitsplit.navigator.navigator import Navigator
from commitsplit.tree import PathTree


class SessionError(Exception):
    """Raised when a selection cannot be turned into a commit."""
    pass


class SplitSession:
    """Tracks the tree still to be split and the commits planned so far.

    Each `spend` hands the selected files to a new CommitCandidate and
    replaces the tree with one built from the files left over. The session
    is done once that tree has no files.
    """

    def __init__(self, tree: PathTree):
        self.tree = tree
        self.navigator: Optional[Navigator] = Navigator(tree)
        self.candidates: list[CommitCandidate] = []

    @property
    def is_done(self) -> bool:
        return self.tree.num_leaf_nodes == 0

    @property
    def remaining_files(self) -> int:
        return self.tree.num_leaf_nodes

    @property
    def total_files(self) -> int:
        return self.remaining_files + sum(len(c.file_paths) for c in self.candidates)

    def spend(self, message: str) -> CommitCandidate:
        """Turn the current selection into a planned commit."""
        message = message.strip()
        if not message:
            raise SessionError("Commit message is empty")
        if self.tree.num_selected == 0:
            raise SessionError("No files selected")

        remaining = self.tree.get_remaining_tree()
        candidate = CommitCandidate(message=message, file_paths=self.tree.get_selected_file_paths())

        if remaining.is_empty():
            self.navigator = None
        else:
            self.navigator.rebind(remaining)
        self.tree = remaining
        self.candidates.append(candidate)
        return candidate
