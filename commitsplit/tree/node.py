"""Path Tree Node"""

from dataclasses import dataclass, field
from typing import Optional

from commitsplit.tree.mark import Mark


@dataclass
class Node:
    """One path component: a directory, or a file when it has no children."""
    key: Optional[str] = None
    mark: Mark = Mark.UNSELECTED
    fullpath: Optional[str] = None
    parent: Optional[int] = None
    children: dict[str, int] = field(default_factory=dict)

    @classmethod
    def new_root(cls) -> 'Node':
        return cls()

    def is_leaf(self) -> bool:
        return not self.children

    def is_root(self) -> bool:
        return self.parent is None
