"""Path Tree - Directory-shaped view of a set of changed files.

Nodes live in a single list owned by the tree and refer to each other by
integer id, so parent and child links never form reference cycles. Ids are
never reused or removed; id 0 is always the root.
"""

import os
import posixpath
from typing import Iterable, Optional

from commitsplit.tree.mark import Mark
from commitsplit.tree.node import Node


class TreeError(Exception):
    """Base class for recoverable path tree failures."""
    pass


class FileNameMissingError(TreeError):
    """Raised when a path has no final component to use as a file name."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"Path has no file name: {path!r}")


class EmptyCollectionError(TreeError):
    """Raised when building a view over a tree that has nothing in it."""
    pass


def clean_path(path) -> str:
    """Collapse '.', '..' and redundant separators without touching the disk."""
    cleaned = posixpath.normpath(os.fspath(path))
    # POSIX keeps a leading '//' as implementation defined; git never means that
    if cleaned.startswith('//'):
        cleaned = '/' + cleaned.lstrip('/')
    return cleaned


def split_components(cleaned: str) -> list[str]:
    """Split a cleaned path into keys. A leading '/' is a component of its own."""
    if cleaned == '.':
        return []
    if cleaned.startswith('/'):
        return ['/'] + [part for part in cleaned[1:].split('/') if part]
    return cleaned.split('/')


def _has_file_name(components: list[str]) -> bool:
    return bool(components) and components[-1] not in ('/', '..')


class PathTree:
    """Arena of path nodes with tri-state selection marks."""

    def __init__(self):
        self._nodes: list[Node] = [Node.new_root()]
        self._leaf_node_ids: list[int] = []
        self.num_leaf_nodes = 0
        self.num_selected = 0

    @classmethod
    def from_paths(cls, file_paths: Iterable) -> 'PathTree':
        tree = cls()
        for file_path in file_paths:
            tree.insert(file_path)
        return tree

    def __len__(self) -> int:
        return len(self._nodes)

    def size(self) -> int:
        """Total number of nodes, root included."""
        return len(self._nodes)

    def is_empty(self) -> bool:
        return not self.get_root().children

    def root_id(self) -> int:
        return 0

    def get_root(self) -> Node:
        return self._nodes[self.root_id()]

    def get_node(self, node_id: int) -> Node:
        return self._nodes[node_id]

    @property
    def leaf_ids(self) -> tuple[int, ...]:
        return tuple(self._leaf_node_ids)

    def children_of(self, node_id: int) -> list[int]:
        """Direct children of a node, in no particular order."""
        return list(self._nodes[node_id].children.values())

    # ------------------------------------------------------------------
    # Structure
    # ------------------------------------------------------------------

    def insert(self, path) -> int:
        """Add a file path, creating any missing directories on the way.

        Returns the leaf id. Inserting a path that is already present walks
        the existing nodes and changes nothing.
        """
        cleaned = clean_path(path)
        components = split_components(cleaned)
        if not _has_file_name(components):
            raise FileNameMissingError(os.fspath(path))

        curr_id = self.root_id()
        last = len(components) - 1

        for index, key in enumerate(components):
            child_id = self._nodes[curr_id].children.get(key)
            if child_id is not None:
                curr_id = child_id
                continue

            is_leaf_node = index == last
            child_id = len(self._nodes)
            self._nodes.append(Node(
                key=key,
                fullpath=cleaned if is_leaf_node else None,
                parent=curr_id,
            ))
            self._nodes[curr_id].children[key] = child_id

            if is_leaf_node:
                self.num_leaf_nodes += 1
                self._leaf_node_ids.append(child_id)

            curr_id = child_id

        return curr_id

    def _walk(self, components: list[str]) -> Optional[int]:
        curr_id = self.root_id()
        for key in components:
            curr_id = self._nodes[curr_id].children.get(key)
            if curr_id is None:
                return None
        return curr_id

    def find(self, path) -> Optional[int]:
        """Id of the file at `path`, or None. Directories are not found."""
        components = split_components(clean_path(path))
        if not _has_file_name(components):
            return None

        node_id = self._walk(components)
        if node_id is None or not self._nodes[node_id].is_leaf():
            return None
        return node_id

    def resolve(self, path) -> Optional[int]:
        """Id of the file or directory at `path`, or None."""
        return self._walk(split_components(clean_path(path)))

    def get_path(self, node_id: int) -> str:
        """Rebuild a node's path from the parent links. The root maps to ''."""
        keys = []
        curr_id = node_id
        while curr_id is not None:
            node = self._nodes[curr_id]
            if node.key is not None:
                keys.append(node.key)
            curr_id = node.parent

        if not keys:
            return ''
        return posixpath.join(*reversed(keys))

    # ------------------------------------------------------------------
    # Marks
    # ------------------------------------------------------------------

    def mark(self, node_id: int, new_mark: Mark) -> None:
        """Mark a node and everything beneath it, then fix up its ancestors."""
        stack = [node_id]
        while stack:
            node = self._nodes[stack.pop()]
            node.mark = new_mark
            stack.extend(node.children.values())

        self._correct_parents_mark(node_id)
        self._update_num_selected()

    def _correct_parents_mark(self, node_id: int) -> None:
        parent_id = self._nodes[node_id].parent
        while parent_id is not None:
            parent = self._nodes[parent_id]
            parent.mark = self._compute_mark_from_children(parent_id)
            parent_id = parent.parent

    def _compute_mark_from_children(self, node_id: int) -> Mark:
        node = self._nodes[node_id]
        if node.is_leaf():
            return node.mark
        return Mark.aggregate(self._nodes[child_id].mark for child_id in node.children.values())

    def _update_num_selected(self) -> None:
        # An UNSELECTED directory has no selected files below it
        num_selected = 0
        stack = self.children_of(self.root_id())

        while stack:
            node = self._nodes[stack.pop()]
            if node.mark is Mark.UNSELECTED:
                continue
            if node.is_leaf():
                if node.mark is Mark.SELECTED:
                    num_selected += 1
            else:
                stack.extend(node.children.values())

        self.num_selected = num_selected

    # ------------------------------------------------------------------
    # Spending a selection
    # ------------------------------------------------------------------

    def get_selected_file_paths(self) -> list[str]:
        """Paths of every selected file, in the order they were inserted."""
        return [
            node.fullpath
            for node in (self._nodes[node_id] for node_id in self._leaf_node_ids)
            if node.mark is Mark.SELECTED
        ]

    def get_remaining_tree(self) -> 'PathTree':
        """A fresh tree holding only the files that are still unselected."""
        new_tree = PathTree()
        for node_id in self._leaf_node_ids:
            node = self._nodes[node_id]
            if node.mark is Mark.UNSELECTED:
                new_tree.insert(node.fullpath)
        return new_tree
