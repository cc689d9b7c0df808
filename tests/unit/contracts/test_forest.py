"""
Tier 0: Node Store Contract Tests

These tests pin down the forest: identities, parent/child links, and the
guarantee that a failed insert changes nothing.
"""

import pytest
from msgtree.forest import (
    NO_PARENT,
    Category,
    DanglingParentError,
    Forest,
    Level,
    MsgTreeError,
    Node,
    NodeIndexError,
    create_forest,
    insert,
)


class TestCreateForest:
    def test_forest_starts_with_root(self):
        forest, root = create_forest("Test::TestTree")
        assert len(forest) == 1
        assert root == 0

    def test_root_is_titled_group(self):
        forest, root = create_forest("Test::TestTree")
        node = forest[root]
        assert node.category is Category.GROUP
        assert node.messages == ("Test::TestTree",)
        assert node.parent is NO_PARENT
        assert node.is_root
        assert node.children == []

    def test_empty_forest(self):
        forest = Forest()
        assert len(forest) == 0
        assert list(forest.roots()) == []


class TestInsert:
    def test_identities_are_sequential(self):
        forest, root = create_forest("T")
        a = forest.add_message(root, "a")
        b = forest.add_message(root, "b")
        c = forest.add_message(a, "c")
        assert (a, b, c) == (1, 2, 3)

    def test_length_counts_every_insert(self):
        forest, root = create_forest("T")
        forest.add_message(root, "first message")
        inner = forest.add_group(root, "inner branch")
        forest.add_message(inner, "inner child")
        deeper = forest.add_group(inner, "deeper branch")
        forest.add_message(deeper, "deeper child")
        assert len(forest) == 6

    def test_children_in_append_order(self):
        forest, root = create_forest("T")
        ids = [forest.add_message(root, str(i)) for i in range(5)]
        assert forest[root].children == ids

    def test_child_records_parent(self):
        forest, root = create_forest("T")
        child = forest.add_info(root, "x")
        assert forest[child].parent == root

    def test_module_level_insert(self):
        forest, root = create_forest("T")
        index = insert(forest, Category.MESSAGES, root, ["a", "b"])
        assert forest[index].messages == ("a", "b")
        assert forest[root].children == [index]

    def test_extra_root(self):
        forest, root = create_forest("T")
        second = insert(forest, Category.GROUP, NO_PARENT, ["other"])
        assert forest[root].children == []
        assert list(forest.roots()) == [root, second]

    def test_empty_messages_rejected(self):
        forest, root = create_forest("T")
        with pytest.raises(ValueError):
            forest.add_messages(root, [])
        assert len(forest) == 1

    def test_level_only_on_groups(self):
        forest, root = create_forest("T")
        with pytest.raises(ValueError):
            forest.insert(Category.MESSAGES, root, ["x"], level=Level.INFO)

    def test_single_string_is_not_split_into_characters(self):
        forest, root = create_forest("T")
        with pytest.raises(TypeError):
            forest.add_messages(root, "ab")
        assert len(forest) == 1
        assert forest[root].children == []

    def test_group_takes_one_heading(self):
        forest, root = create_forest("T")
        with pytest.raises(ValueError):
            forest.insert(Category.GROUP, root, ["heading", "lost line"])
        assert len(forest) == 1

    def test_break_carries_no_text(self):
        forest, root = create_forest("T")
        with pytest.raises(ValueError):
            forest.insert(Category.BREAK, root, ["hidden"])
        assert len(forest) == 1


class TestDanglingParent:
    def test_parent_not_yet_added(self):
        forest, root = create_forest("T")
        with pytest.raises(DanglingParentError):
            forest.add_message(root + 1, "first message")

    def test_failed_insert_leaves_forest_unchanged(self):
        forest, root = create_forest("T")
        forest.add_message(root, "a")
        before = [Node(n.category, n.messages, n.parent, list(n.children), n.level) for n in forest]

        with pytest.raises(DanglingParentError):
            forest.add_info(7, "nope")

        assert len(forest) == 2
        assert list(forest) == before

    def test_negative_parent(self):
        forest, _ = create_forest("T")
        with pytest.raises(DanglingParentError):
            forest.add_message(-1, "x")

    def test_error_hierarchy(self):
        forest, _ = create_forest("T")
        with pytest.raises(MsgTreeError) as exc:
            forest.add_break(3)
        assert isinstance(exc.value, ValueError)
        assert exc.value.parent == 3
        assert exc.value.size == 1


class TestConvenience:
    @pytest.mark.parametrize("method,level", [
        ("add_info", Level.INFO),
        ("add_debug", Level.DEBUG),
        ("add_warn", Level.WARN),
        ("add_error", Level.ERROR),
    ])
    def test_severity_groups(self, method, level):
        forest, root = create_forest("T")
        index = getattr(forest, method)(root, "branch")
        node = forest[index]
        assert node.category is Category.GROUP
        assert node.level is level
        assert node.messages == ("branch",)

    def test_plain_group_has_no_level(self):
        forest, root = create_forest("T")
        assert forest[forest.add_group(root, "g")].level is None

    def test_add_messages_keeps_order(self):
        forest, root = create_forest("T")
        index = forest.add_messages(root, ["message 4", "message 5", "message 6"])
        assert forest[index].messages == ("message 4", "message 5", "message 6")

    def test_add_messages_accepts_generator(self):
        forest, root = create_forest("T")
        index = forest.add_messages(root, (f"m{i}" for i in range(3)))
        assert len(forest[index].messages) == 3

    def test_add_break(self):
        forest, root = create_forest("T")
        node = forest[forest.add_break(root)]
        assert node.category is Category.BREAK
        assert node.messages == ("",)

    def test_line_breaks_scenario(self):
        forest, root = create_forest("Test::TestTree")
        info = forest.add_info(root, "info branch")
        forest.add_message(info, "message 1")
        forest.add_break(info)
        forest.add_messages(info, ["message 2", "message 3"])
        for _ in range(6):
            forest.add_break(info)
        forest.add_debug(info, "debug branch")
        forest.add_break(info)
        last = forest.add_messages(info, ["message 4", "message 5"])

        assert len(forest) == 14
        assert len(forest[last].messages) == 2


class TestLookup:
    def test_out_of_range(self):
        forest, _ = create_forest("T")
        with pytest.raises(NodeIndexError):
            forest[1]

    def test_negative_index_is_not_an_identity(self):
        forest, _ = create_forest("T")
        with pytest.raises(NodeIndexError):
            forest[-1]

    def test_level_from_label(self):
        assert Level.from_label("warn: disk almost full") is Level.WARN
        assert Level.from_label("warning") is None
