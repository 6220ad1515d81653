"""Navigator - Browse a path tree one directory at a time."""

import posixpath

from commitsplit.tree import EmptyCollectionError, Mark, PathTree


class Navigator:
    """Current directory and selection toggles over a PathTree.

    Entries are listed directories first, then files, each group sorted by
    name. Indexes passed to `toggle` and `enter` refer to that order.
    """

    def __init__(self, tree: PathTree):
        if tree.is_empty():
            raise EmptyCollectionError("Nothing to browse: no changed files")
        self.tree = tree
        self.current_id = tree.root_id()

    def _sort_key(self, node_id: int) -> tuple[bool, str]:
        node = self.tree.get_node(node_id)
        return (node.is_leaf(), node.key)

    def entries(self) -> list[int]:
        return sorted(self.tree.children_of(self.current_id), key=self._sort_key)

    def entry(self, index: int) -> int:
        entries = self.entries()
        if not 0 <= index < len(entries):
            raise IndexError(f"No entry {index + 1}: choose 1-{len(entries)}")
        return entries[index]

    @property
    def at_root(self) -> bool:
        return self.tree.get_node(self.current_id).is_root()

    @property
    def breadcrumb(self) -> str:
        path = self.tree.get_path(self.current_id)
        if not path:
            return "./"
        if path.startswith('/'):
            return path if path == '/' else f"{path}/"
        return f"./{path}/"

    def _toggle_node(self, node_id: int) -> Mark:
        new_mark = self.tree.get_node(node_id).mark.toggled()
        self.tree.mark(node_id, new_mark)
        return new_mark

    def toggle(self, index: int) -> Mark:
        """Flip one entry between selected and unselected."""
        return self._toggle_node(self.entry(index))

    def toggle_all(self) -> Mark:
        """Flip the current directory, and with it everything below it."""
        return self._toggle_node(self.current_id)

    def enter(self, index: int) -> bool:
        """Open a directory entry. Returns False for files."""
        node_id = self.entry(index)
        if self.tree.get_node(node_id).is_leaf():
            return False
        self.current_id = node_id
        return True

    def leave(self) -> bool:
        """Go up one level. Returns False at the root."""
        parent_id = self.tree.get_node(self.current_id).parent
        if parent_id is None:
            return False
        self.current_id = parent_id
        return True

    def rebind(self, tree: PathTree) -> None:
        """Switch to a new tree, staying in the same directory if it survived."""
        if tree.is_empty():
            raise EmptyCollectionError("Nothing to browse: no changed files")

        path = self.tree.get_path(self.current_id)
        current_id = tree.root_id()
        while path:
            node_id = tree.resolve(path)
            if node_id is not None and not tree.get_node(node_id).is_leaf():
                current_id = node_id
                break
            # dirname never climbs above '/' on its own
            path = '' if path == '/' else posixpath.dirname(path)

        self.tree = tree
        self.current_id = current_id
