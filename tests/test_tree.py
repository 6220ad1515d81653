"""
Unit tests for the path tree: insertion, lookup, marks and residual trees.

Run with:
    pytest tests/test_tree.py -v
"""

import posixpath
import random

import pytest

from commitsplit.tree import (
    FileNameMissingError,
    Mark,
    PathTree,
    TreeError,
    clean_path,
)


SCENARIO_PATHS = [
    "./a/b/c/file.txt",
    "./a/b/file.txt",
    "./a/c/file.txt",
    "a/b/c/file2.txt",
]


@pytest.fixture
def tree():
    # .
    # └── a
    #     ├── b
    #     │   ├── c
    #     │   │   ├── file.txt
    #     │   │   └── file2.txt
    #     │   └── file.txt
    #     └── c
    #         └── file.txt
    return PathTree.from_paths(SCENARIO_PATHS)


def assert_invariants(tree: PathTree) -> None:
    """Check every structural and mark invariant of a tree."""
    root = tree.get_node(tree.root_id())
    assert root.key is None
    assert root.fullpath is None
    assert root.parent is None

    selected_leaves = 0
    for node_id in range(len(tree)):
        node = tree.get_node(node_id)
        if node_id != tree.root_id():
            parent = tree.get_node(node.parent)
            assert parent.children[node.key] == node_id

        if node_id == tree.root_id() and tree.is_empty():
            continue
        if node.is_leaf():
            assert node.fullpath is not None
            assert node_id in tree.leaf_ids
            assert node.mark is not Mark.PARTIALLY_SELECTED
            if node.mark is Mark.SELECTED:
                selected_leaves += 1
        else:
            assert node.fullpath is None
            assert node_id not in tree.leaf_ids
            child_marks = [tree.get_node(c).mark for c in tree.children_of(node_id)]
            if all(m is Mark.SELECTED for m in child_marks):
                assert node.mark is Mark.SELECTED
            elif all(m is Mark.UNSELECTED for m in child_marks):
                assert node.mark is Mark.UNSELECTED
            else:
                assert node.mark is Mark.PARTIALLY_SELECTED

    assert tree.num_selected == selected_leaves
    assert tree.num_leaf_nodes == len(tree.leaf_ids)


# ---------------------------------------------------------------------------
# Mark
# ---------------------------------------------------------------------------

class TestMark:

    @pytest.mark.parametrize("marks, expected", [
        pytest.param([Mark.SELECTED, Mark.SELECTED], Mark.SELECTED, id="all-selected"),
        pytest.param([Mark.UNSELECTED, Mark.UNSELECTED], Mark.UNSELECTED, id="all-unselected"),
        pytest.param([Mark.SELECTED, Mark.UNSELECTED], Mark.PARTIALLY_SELECTED, id="mixed"),
        pytest.param([Mark.PARTIALLY_SELECTED], Mark.PARTIALLY_SELECTED, id="partial-child"),
        pytest.param([Mark.SELECTED, Mark.PARTIALLY_SELECTED], Mark.PARTIALLY_SELECTED, id="selected-and-partial"),
    ])
    def test_aggregate(self, marks, expected):
        assert Mark.aggregate(marks) is expected

    @pytest.mark.parametrize("mark, expected", [
        (Mark.UNSELECTED, Mark.SELECTED),
        (Mark.PARTIALLY_SELECTED, Mark.SELECTED),
        (Mark.SELECTED, Mark.UNSELECTED),
    ])
    def test_toggled_never_partial(self, mark, expected):
        assert mark.toggled() is expected


# ---------------------------------------------------------------------------
# PathTree: construction and insertion
# ---------------------------------------------------------------------------

class TestPathTreeInsert:

    def test_new_tree_has_only_root(self):
        tree = PathTree()
        assert tree.size() == 1
        assert tree.num_leaf_nodes == 0
        assert tree.num_selected == 0
        assert tree.is_empty()
        assert tree.get_root().is_root()
        assert tree.get_root().is_leaf()

    def test_scenario_shape(self, tree):
        assert tree.size() == 8 + 1
        assert len(tree) == 9
        assert tree.num_leaf_nodes == 4
        assert_invariants(tree)

    def test_insert_returns_leaf_id(self):
        tree = PathTree()
        leaf_id = tree.insert("docs/readme.md")
        assert tree.get_node(leaf_id).fullpath == "docs/readme.md"
        assert tree.leaf_ids == (leaf_id,)

    def test_insert_is_idempotent(self):
        tree = PathTree()
        tree.insert("a/b/file.txt")
        size, leaves = tree.size(), tree.num_leaf_nodes

        tree.insert("a/b/file.txt")
        tree.insert("./a/./b//file.txt")
        tree.insert("a/x/../b/file.txt")

        assert tree.size() == size
        assert tree.num_leaf_nodes == leaves
        assert len(tree.leaf_ids) == 1

    def test_shared_prefixes_reuse_directories(self):
        tree = PathTree.from_paths(["src/a.py", "src/b.py"])
        assert tree.size() == 4
        src_id = tree.resolve("src")
        assert len(tree.children_of(src_id)) == 2

    def test_fullpath_is_normalized(self):
        tree = PathTree()
        leaf_id = tree.insert("./src//pkg/../mod.py")
        assert tree.get_node(leaf_id).fullpath == "src/mod.py"

    def test_accepts_path_like(self, tmp_path):
        tree = PathTree()
        leaf_id = tree.insert(tmp_path / "file.txt")
        assert tree.get_node(leaf_id).fullpath == clean_path(str(tmp_path / "file.txt"))

    def test_absolute_path_keeps_root_component(self):
        tree = PathTree()
        leaf_id = tree.insert("/etc/hosts")
        assert tree.get_path(leaf_id) == "/etc/hosts"
        assert tree.get_node(tree.children_of(tree.root_id())[0]).key == "/"

    def test_leaf_ids_keep_insertion_order(self):
        tree = PathTree.from_paths(["z.txt", "a/b.txt", "m.txt"])
        paths = [tree.get_node(i).fullpath for i in tree.leaf_ids]
        assert paths == ["z.txt", "a/b.txt", "m.txt"]

    @pytest.mark.parametrize("path", [".", "", "./", "/", "a/..", "..", "a/b/../.."])
    def test_missing_file_name(self, path):
        tree = PathTree()
        with pytest.raises(FileNameMissingError):
            tree.insert(path)
        assert tree.size() == 1
        assert tree.num_leaf_nodes == 0

    def test_missing_file_name_is_tree_error(self):
        with pytest.raises(TreeError):
            PathTree.from_paths(["ok.txt", "."])


# ---------------------------------------------------------------------------
# PathTree: lookup
# ---------------------------------------------------------------------------

class TestPathTreeLookup:

    def test_find_leaf(self, tree):
        node_id = tree.find("a/b/c/file.txt")
        assert node_id is not None
        assert tree.get_node(node_id).fullpath == "a/b/c/file.txt"

    def test_find_normalizes(self, tree):
        assert tree.find("./a/b/../b/file.txt") == tree.find("a/b/file.txt")

    def test_find_directory_is_not_found(self, tree):
        assert tree.find("a/b/c") is None
        assert tree.find("a") is None

    def test_find_missing(self, tree):
        assert tree.find("a/b/missing.txt") is None
        assert tree.find("nope/file.txt") is None
        assert tree.find(".") is None

    def test_resolve_directory(self, tree):
        node_id = tree.resolve("a/b/c")
        assert node_id is not None
        assert not tree.get_node(node_id).is_leaf()
        assert tree.resolve(".") == tree.root_id()

    def test_get_path(self, tree):
        assert tree.get_path(tree.root_id()) == ""
        assert tree.get_path(tree.resolve("a/b/c")) == "a/b/c"

    def test_get_path_round_trip(self, tree):
        for path in SCENARIO_PATHS:
            assert tree.get_path(tree.find(path)) == clean_path(path)

    def test_children_of(self, tree):
        a_id = tree.resolve("a")
        keys = sorted(tree.get_node(c).key for c in tree.children_of(a_id))
        assert keys == ["b", "c"]
        assert tree.children_of(tree.find("a/c/file.txt")) == []

    def test_get_node_out_of_range(self, tree):
        with pytest.raises(IndexError):
            tree.get_node(len(tree))


# ---------------------------------------------------------------------------
# Mark engine
# ---------------------------------------------------------------------------

class TestMarkEngine:

    def test_scenario_mark_directory(self, tree):
        node_id = tree.resolve("a/b/c")
        tree.mark(node_id, Mark.SELECTED)

        assert tree.get_node(node_id).mark is Mark.SELECTED
        assert tree.get_node(tree.find("a/b/c/file.txt")).mark is Mark.SELECTED
        assert tree.get_node(tree.find("a/b/c/file2.txt")).mark is Mark.SELECTED
        assert tree.get_node(tree.resolve("a/b")).mark is Mark.PARTIALLY_SELECTED
        assert tree.get_node(tree.resolve("a")).mark is Mark.PARTIALLY_SELECTED
        assert tree.get_node(tree.root_id()).mark is Mark.PARTIALLY_SELECTED
        assert tree.num_selected == 2
        assert_invariants(tree)

    def test_downward_unselect(self, tree):
        a_id = tree.resolve("a")
        tree.mark(a_id, Mark.SELECTED)
        assert tree.num_selected == 4

        tree.mark(a_id, Mark.UNSELECTED)
        for leaf_id in tree.leaf_ids:
            assert tree.get_node(leaf_id).mark is Mark.UNSELECTED
        assert tree.num_selected == 0
        assert_invariants(tree)

    def test_upward_aggregation_two_leaves(self):
        tree = PathTree.from_paths(["dir/one.txt", "dir/two.txt"])
        dir_id = tree.resolve("dir")
        one, two = tree.find("dir/one.txt"), tree.find("dir/two.txt")

        tree.mark(one, Mark.SELECTED)
        assert tree.get_node(dir_id).mark is Mark.PARTIALLY_SELECTED

        tree.mark(two, Mark.SELECTED)
        assert tree.get_node(dir_id).mark is Mark.SELECTED

        tree.mark(one, Mark.UNSELECTED)
        tree.mark(two, Mark.UNSELECTED)
        assert tree.get_node(dir_id).mark is Mark.UNSELECTED

    def test_selecting_every_leaf_selects_root(self, tree):
        for leaf_id in tree.leaf_ids:
            tree.mark(leaf_id, Mark.SELECTED)
        assert tree.get_node(tree.root_id()).mark is Mark.SELECTED
        assert tree.num_selected == tree.num_leaf_nodes

    def test_mark_root(self, tree):
        tree.mark(tree.root_id(), Mark.SELECTED)
        assert tree.num_selected == 4
        assert_invariants(tree)

    def test_remark_same_value(self, tree):
        leaf_id = tree.find("a/c/file.txt")
        tree.mark(leaf_id, Mark.SELECTED)
        tree.mark(leaf_id, Mark.SELECTED)
        assert tree.num_selected == 1
        assert_invariants(tree)

    @pytest.mark.parametrize("seed", range(5))
    def test_invariants_hold_after_random_marks(self, seed):
        rng = random.Random(seed)
        paths = [
            posixpath.join(*(rng.choice("abc") for _ in range(rng.randint(0, 3))), f"f{i}.txt")
            for i in range(20)
        ]
        tree = PathTree.from_paths(paths)
        assert_invariants(tree)

        for _ in range(40):
            node_id = rng.randrange(len(tree))
            tree.mark(node_id, rng.choice([Mark.SELECTED, Mark.UNSELECTED]))
            assert_invariants(tree)


# ---------------------------------------------------------------------------
# Residual-tree builder
# ---------------------------------------------------------------------------

class TestResidualTree:

    def test_scenario_selected_paths(self, tree):
        tree.mark(tree.resolve("a/b/c"), Mark.SELECTED)
        assert tree.get_selected_file_paths() == ["a/b/c/file.txt", "a/b/c/file2.txt"]

    def test_scenario_remaining_tree(self, tree):
        tree.mark(tree.resolve("a/b/c"), Mark.SELECTED)
        remaining = tree.get_remaining_tree()

        assert remaining.num_leaf_nodes == 2
        assert remaining.size() == 8 + 1 - 3
        assert remaining.num_selected == 0
        assert remaining.find("a/b/file.txt") is not None
        assert remaining.find("a/c/file.txt") is not None
        assert remaining.resolve("a/b/c") is None
        assert_invariants(remaining)

    def test_selected_paths_follow_insertion_order(self):
        tree = PathTree.from_paths(["z.txt", "a/b.txt", "m.txt"])
        tree.mark(tree.root_id(), Mark.SELECTED)
        assert tree.get_selected_file_paths() == ["z.txt", "a/b.txt", "m.txt"]

    def test_nothing_selected(self, tree):
        assert tree.get_selected_file_paths() == []
        remaining = tree.get_remaining_tree()
        assert remaining.size() == tree.size()
        assert remaining.num_leaf_nodes == tree.num_leaf_nodes

    def test_everything_selected_leaves_empty_tree(self, tree):
        tree.mark(tree.root_id(), Mark.SELECTED)
        remaining = tree.get_remaining_tree()
        assert remaining.is_empty()
        assert remaining.num_leaf_nodes == 0
        assert remaining.size() == 1

    def test_original_tree_untouched(self, tree):
        tree.mark(tree.resolve("a/c"), Mark.SELECTED)
        tree.get_remaining_tree()
        assert tree.num_selected == 1
        assert tree.num_leaf_nodes == 4

    @pytest.mark.parametrize("seed", range(5))
    def test_remaining_holds_exactly_unselected(self, seed):
        rng = random.Random(seed)
        paths = [f"{rng.choice('xyz')}/{rng.choice('pq')}/file{i}.py" for i in range(15)]
        tree = PathTree.from_paths(paths)
        for _ in range(6):
            tree.mark(rng.randrange(len(tree)), rng.choice([Mark.SELECTED, Mark.UNSELECTED]))

        selected = set(tree.get_selected_file_paths())
        remaining = tree.get_remaining_tree()
        remaining_paths = {remaining.get_node(i).fullpath for i in remaining.leaf_ids}

        assert remaining.num_leaf_nodes == tree.num_leaf_nodes - tree.num_selected
        assert remaining_paths.isdisjoint(selected)
        assert remaining_paths | selected == {clean_path(p) for p in paths}
