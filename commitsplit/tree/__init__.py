"""Path Tree Package"""

from commitsplit.tree.mark import Mark
from commitsplit.tree.node import Node
from commitsplit.tree.path_tree import (
    PathTree,
    TreeError,
    FileNameMissingError,
    EmptyCollectionError,
    clean_path,
)

__all__ = [
    "Mark",
    "Node",
    "PathTree",
    "TreeError",
    "FileNameMissingError",
    "EmptyCollectionError",
    "clean_path",
]
