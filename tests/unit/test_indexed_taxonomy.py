import pytest

from domain.category import Category
from domain.errors import EmptyPathError, NodeNotFoundError, RootMismatchError, UnknownTagError
from domain.indexed import IndexedTaxonomy
from domain.tags import Translation
from domain.treepath import Treepath


def _scenario_a() -> IndexedTaxonomy:
    t = IndexedTaxonomy()
    for path in (["A", "B"], ["A", "C"], ["A", "A", "A"], ["A", "A", "D", "E"]):
        t.add_node(path)
    t.tag("alfa", ["A"])
    t.tag("alfa", ["A", "A", "A"])
    t.tag("alfa", ["A", "A", "D"])
    t.tag("beta", ["A", "A", "D"])
    return t


def _names(nodes) -> list[str]:
    return sorted(node.name for node in nodes)


def _tag_names(tags) -> list[str]:
    return sorted(tag.name for tag in tags)


def _assert_indices_match_tree(t: IndexedTaxonomy) -> None:
    """Index lookups agree with a full walk of the tree."""
    nodes = t.root.list_descendants() if t.root is not None else []
    assert t.node_count == len(nodes)
    for node in nodes:
        assert node in t.find_nodes_by_name(node.name)
        for tag_name in node.tag_names:
            assert node in t.find_nodes_by_tag_name(tag_name)
    used = {tag_name for node in nodes for tag_name in node.tag_names}
    assert set(_tag_names(t.all_used_tags())) == used
    assert used <= set(_tag_names(t.all_registered_tags()))


def test_build_scenario() -> None:
    t = _scenario_a()

    assert _names(t.list_descendants(["A"])) == ["A", "A", "A", "B", "C", "D", "E"]
    assert _names(t.find_nodes_by_tag_name("alfa")) == ["A", "A", "D"]
    assert _names(t.find_nodes_by_tag_name("beta")) == ["D"]
    assert t.node_count == 7
    _assert_indices_match_tree(t)


def test_remove_leaf_keeps_tags() -> None:
    t = _scenario_a()
    t.remove_subtree(["A", "A", "A"])

    assert _names(t.list_descendants(["A"])) == ["A", "A", "B", "C", "D", "E"]
    assert _tag_names(t.all_registered_tags()) == ["alfa", "beta"]
    assert _tag_names(t.all_used_tags()) == ["alfa", "beta"]
    _assert_indices_match_tree(t)


def test_remove_middle_prunes_indices() -> None:
    t = _scenario_a()
    t.remove_subtree(["A", "A"])

    assert _names(t.list_descendants(["A"])) == ["A", "B", "C"]
    assert _tag_names(t.all_used_tags()) == ["alfa"]
    assert _tag_names(t.all_registered_tags()) == ["alfa", "beta"]
    assert t.find_nodes_by_name("D") == []
    assert t.find_nodes_by_name("E") == []
    assert t.find_nodes_by_tag_name("beta") == []
    assert _names(t.find_nodes_by_name("A")) == ["A"]
    _assert_indices_match_tree(t)


def test_translation_lookup_matches_tag_lookup() -> None:
    t = _scenario_a()
    t.add_tag_translation("alfa", Translation.of("alfa_uk", "en-GB"))

    by_translation = t.find_nodes_by_tag_translation(Translation.of("alfa_uk", "en-GB"))
    assert set(by_translation) == set(t.find_nodes_by_tag_name("alfa"))
    assert t.find_nodes_by_tag_translation(Translation.of("alfa_uk", "en-US")) == []


def test_add_node_returns_terminal_node_and_is_idempotent() -> None:
    t = _scenario_a()

    d = t.add_node(["A", "A", "D"])
    assert d.name == "D"
    assert d.path == Treepath.of("A", "A", "D")
    assert t.add_node(["A", "A", "D"], ["alfa"]) is d
    assert t.node_count == 7
    assert _names(t.find_nodes_by_tag_name("alfa")) == ["A", "A", "D"]


def test_node_references_reflect_later_changes() -> None:
    t = _scenario_a()
    d = t.find_node_by_path(["A", "A", "D"])

    t.tag("gamma", ["A", "A", "D"])
    assert "gamma" in d.tag_names
    assert [tag.name for tag in d.tags if tag.name == "gamma"] == ["gamma"]

    t.untag("beta", ["A", "A", "D"])
    assert d.tag_names == frozenset({"alfa", "gamma"})
    assert _tag_names(t.all_used_tags()) == ["alfa", "gamma"]
    _assert_indices_match_tree(t)


def test_add_or_update_child_keeps_indices_in_sync() -> None:
    t = _scenario_a()
    c = t.find_node_by_path(["A", "C"])

    x = c.add_or_update_child("X", ["gamma"])
    assert x.parent is c
    assert c.add_or_update_child("X") is x
    assert t.find_nodes_by_name("X") == [x]
    assert t.find_nodes_by_tag_name("gamma") == [x]
    assert t.find_tag("gamma") is not None
    _assert_indices_match_tree(t)


def test_removed_nodes_are_detached() -> None:
    t = _scenario_a()
    d = t.find_node_by_path(["A", "A", "D"])
    t.remove_subtree(["A", "A"])

    assert not d.is_attached
    with pytest.raises(NodeNotFoundError):
        d.add_or_update_child("X")
    assert t.find_node_by_path(["A", "A", "D"]) is None


def test_remove_root_empties_taxonomy() -> None:
    t = _scenario_a()
    t.add_tag_translation("alfa", Translation.of("alfa_uk", "en-GB"))
    t.remove_subtree(["A"])

    assert t.root is None
    assert t.node_count == 0
    assert t.find_nodes_by_name("A") == []
    assert t.find_nodes_by_tag_name("alfa") == []
    assert t.find_nodes_by_tag_translation(Translation.of("alfa_uk", "en-GB")) == []
    assert _tag_names(t.all_registered_tags()) == ["alfa", "beta"]
    assert t.all_used_tags() == []

    t.add_node(["Z"])
    assert t.root.name == "Z"


def test_unregister_tag_detaches_from_nodes() -> None:
    t = _scenario_a()
    d = t.find_node_by_path(["A", "A", "D"])
    t.unregister_tag("beta")

    assert t.find_tag("beta") is None
    assert d.tag_names == frozenset({"alfa"})
    assert t.find_nodes_by_tag_name("beta") == []
    t.unregister_tag("beta")  # unknown tag: no-op
    _assert_indices_match_tree(t)


def test_register_tag_is_idempotent() -> None:
    t = _scenario_a()
    t.add_tag_translation("alfa", Translation.of("alfa_uk", "en-GB"))
    t.register_tag("alfa")
    t.register_tag("gamma")

    assert t.find_tag("alfa").translations_by_locale == {"en-GB": "alfa_uk"}
    assert _tag_names(t.all_registered_tags()) == ["alfa", "beta", "gamma"]
    assert _tag_names(t.all_used_tags()) == ["alfa", "beta"]


def test_errors_and_noops() -> None:
    t = _scenario_a()

    with pytest.raises(EmptyPathError):
        t.add_node([])
    with pytest.raises(EmptyPathError):
        t.remove_subtree([])
    with pytest.raises(EmptyPathError):
        t.untag("alfa", [])
    with pytest.raises(RootMismatchError):
        t.add_node(["Z"])
    with pytest.raises(NodeNotFoundError):
        t.tag("alfa", ["A", "missing"])
    with pytest.raises(NodeNotFoundError):
        t.untag("alfa", ["A", "missing"])
    with pytest.raises(UnknownTagError):
        t.add_tag_translation("ghost", Translation.of("x", "en"))

    t.remove_subtree(["Z", "B"])
    t.remove_subtree(["A", "missing"])
    t.untag("gamma", ["A"])
    assert t.node_count == 7
    _assert_indices_match_tree(t)


def test_nodes_satisfy_category_contract() -> None:
    t = _scenario_a()
    d = t.find_node_by_path(["A", "A", "D"])

    assert isinstance(d, Category)
    assert d.find_child("E").is_leaf
    assert t.root.is_root
    assert not d.is_root
    assert t.root.find_descendant(Treepath.of("A", "D", "E")).name == "E"
    assert _names(d.list_descendants()) == ["D", "E"]


def test_node_name_and_parent_are_read_only() -> None:
    t = _scenario_a()
    b = t.add_node(["A", "B"])

    with pytest.raises(AttributeError):
        b.name = "Z"
    with pytest.raises(AttributeError):
        b.parent = None

    assert t.find_nodes_by_name("Z") == []
    assert t.find_nodes_by_name("B") == [b]
    assert b.parent is t.root
    _assert_indices_match_tree(t)


def test_registered_tags_are_read_only() -> None:
    t = _scenario_a()
    t.add_tag_translation("alfa", Translation.of("alfa_uk", "en-GB"))

    with pytest.raises(TypeError):
        t.find_tag("alfa").translations_by_locale["en-GB"] = "x"

    assert t.find_nodes_by_tag_translation(Translation.of("x", "en-GB")) == []
    assert len(t.find_nodes_by_tag_translation(Translation.of("alfa_uk", "en-GB"))) == 3
