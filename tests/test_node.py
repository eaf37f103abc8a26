"""
tests.test_node
~~~~~~~~~~~~~~~
Unit tests for the configuration Node tree.  No database access required.
"""
from __future__ import annotations

import pytest

from apps.configuration.engine import (
    ConfigurationError,
    Deferred,
    InvalidKeyType,
    InvalidStructure,
    Node,
    NotFound,
    ReadOnlyNode,
)


# ===========================================================================
# TestConstruction
# ===========================================================================

class TestConstruction:

    def test_nested_mappings_become_nodes(self):
        node = Node({"a": {"b": {"c": 1}}})
        assert isinstance(node["a"], Node)
        assert isinstance(node["a"]["b"], Node)
        assert node["a"]["b"]["c"] == 1

    def test_mappings_inside_lists_are_converted(self):
        node = Node({"a": [1, {"b": 2}, (3, 4)]})
        items = node["a"]
        assert items[0] == 1
        assert isinstance(items[1], Node)
        assert items[2] == [3, 4]

    def test_non_string_key_raises_invalid_structure(self):
        with pytest.raises(InvalidStructure):
            Node({1: "one"})

    def test_nested_non_string_key_raises_invalid_structure(self):
        with pytest.raises(InvalidStructure):
            Node({"a": {True: "yes"}})

    def test_non_mapping_input_raises_invalid_structure(self):
        with pytest.raises(InvalidStructure):
            Node(["a", "b"])

    def test_conversion_does_not_alias_input(self):
        source = {"a": {"b": 1}, "items": [1, 2]}
        node = Node(source)
        source["a"]["b"] = 99
        source["items"].append(3)
        assert node["a"]["b"] == 1
        assert node["items"] == [1, 2]

    def test_assigned_node_is_copied(self):
        inner = Node({"x": 1})
        node = Node()
        node["inner"] = inner
        inner["x"] = 2
        assert node["inner"]["x"] == 1
        assert node["inner"] is not inner

    def test_equality_is_structural(self):
        assert Node({"a": {"b": [1, 2]}}) == Node({"a": {"b": [1, 2]}})
        assert Node({"a": 1}) != Node({"a": 2})


# ===========================================================================
# TestAccess
# ===========================================================================

class TestAccess:

    def test_missing_key_raises_not_found(self):
        node = Node({"a": 1})
        with pytest.raises(NotFound) as exc_info:
            node["host"]
        assert exc_info.value.key == "host"
        assert str(exc_info.value) == "missing key 'host' in configuration"

    def test_not_found_is_a_key_error_and_configuration_error(self):
        with pytest.raises(KeyError):
            Node().get("a")
        with pytest.raises(ConfigurationError):
            Node().get("a")

    def test_explicit_none_is_defined(self):
        node = Node({"a": None})
        assert node.has_key("a")
        assert node["a"] is None

    def test_non_string_key_on_read_raises_invalid_key_type(self):
        with pytest.raises(InvalidKeyType):
            Node({"a": 1})[1]

    def test_non_string_key_on_write_raises_invalid_key_type(self):
        node = Node()
        with pytest.raises(InvalidKeyType):
            node[("a",)] = 1

    def test_invalid_key_type_is_a_type_error(self):
        with pytest.raises(TypeError):
            Node().get(None)

    def test_set_converts_value(self):
        node = Node()
        node.set("a", {"b": 12})
        assert isinstance(node.get("a"), Node)
        assert node.to_dict() == {"a": {"b": 12}}

    def test_contains(self):
        node = Node({"a": None})
        assert "a" in node
        assert "b" not in node


# ===========================================================================
# TestDeferred
# ===========================================================================

class TestDeferred:

    def test_not_evaluated_on_assignment(self):
        calls = []
        node = Node()
        node["lazy"] = Deferred(lambda: calls.append(1) or len(calls))
        assert calls == []

    def test_evaluated_on_every_read(self):
        calls = []
        node = Node()
        node["lazy"] = Deferred(lambda: calls.append(1) or len(calls))
        values = [node["lazy"] for _ in range(5)]
        assert values == [1, 2, 3, 4, 5]
        assert len(calls) == 5

    def test_has_key_does_not_evaluate(self):
        calls = []
        node = Node({"lazy": Deferred(lambda: calls.append(1))})
        assert node.has_key("lazy")
        assert calls == []

    def test_sees_later_changes(self):
        node = Node({"app_mode": "katello"})
        node["is_katello"] = Deferred(lambda: node["app_mode"] == "katello")
        assert node["is_katello"] is True
        node["app_mode"] = "headpin"
        assert node["is_katello"] is False

    def test_to_dict_evaluates(self):
        node = Node({"lazy": Deferred(lambda: "value")})
        assert node.to_dict() == {"lazy": "value"}

    def test_copy_keeps_deferred_unevaluated(self):
        calls = []
        node = Node({"lazy": Deferred(lambda: calls.append(1) or "v")})
        copied = node.copy()
        assert calls == []
        assert copied["lazy"] == "v"

    def test_requires_callable(self):
        with pytest.raises(TypeError):
            Deferred("not callable")


# ===========================================================================
# TestPresent
# ===========================================================================

class TestPresent:

    def test_absent_first_key(self):
        assert Node({"x": 1}).present("a", "b") is False

    def test_first_key_not_a_node(self):
        assert Node({"a": "scalar"}).present("a", "b") is False

    def test_falsy_values_are_not_present(self):
        node = Node({"a": None, "b": False, "c": "", "d": {}})
        assert not any(node.present(key) for key in "abcd")

    def test_full_path_resolves(self):
        node = Node({"a": {"b": {"c": "set"}}})
        assert node.present("a", "b", "c") is True
        assert node.present("a", "b", "missing") is False

    def test_requires_a_key(self):
        with pytest.raises(ValueError):
            Node().present()


# ===========================================================================
# TestIteration
# ===========================================================================

class TestIteration:

    def test_items_keep_insertion_order(self):
        node = Node({"b": 1, "a": 2, "c": 3})
        assert [key for key, _ in node.items()] == ["b", "a", "c"]

    def test_items_restart_on_each_call(self):
        node = Node({"a": 1, "b": 2})
        assert list(node.items()) == list(node.items()) == [("a", 1), ("b", 2)]

    def test_items_iterate_a_snapshot(self):
        node = Node({"a": 1})
        seen = []
        for key, value in node.items():
            node["added"] = True
            seen.append(key)
        assert seen == ["a"]
        assert node.has_key("added")

    def test_len_and_keys(self):
        node = Node({"a": 1, "b": 2})
        assert len(node) == 2
        assert node.keys() == ["a", "b"]
        assert list(node) == ["a", "b"]


# ===========================================================================
# TestDeepMerge
# ===========================================================================

class TestDeepMerge:

    def test_nested_mappings_merge(self):
        node = Node({"a": {"x": 1}}).deep_merge({"a": {"y": 2}})
        assert node.to_dict() == {"a": {"x": 1, "y": 2}}

    def test_nil_does_not_clobber_subtree(self):
        node = Node({"a": {"x": 1}}).deep_merge({"a": None})
        assert node.to_dict() == {"a": {"x": 1}}

    def test_nil_replaces_scalar(self):
        node = Node({"a": 1}).deep_merge({"a": None})
        assert node.to_dict() == {"a": None}

    def test_sequences_replace(self):
        node = Node({"a": [1, 2]}).deep_merge({"a": [3]})
        assert node.to_dict() == {"a": [3]}

    def test_scalar_replaces_subtree(self):
        node = Node({"a": {"x": 1}}).deep_merge({"a": "flat"})
        assert node.to_dict() == {"a": "flat"}

    def test_new_keys_are_added(self):
        node = Node({"a": 1}).deep_merge({"b": {"c": 2}})
        assert node.to_dict() == {"a": 1, "b": {"c": 2}}

    def test_returns_receiver_for_folding(self):
        node = Node()
        result = node.deep_merge({"a": {"x": 1}}).deep_merge({"a": {"x": 2, "y": 3}})
        assert result is node
        assert node.to_dict() == {"a": {"x": 2, "y": 3}}

    def test_none_is_a_no_op(self):
        node = Node({"a": 1})
        assert node.deep_merge(None) is node
        assert node.to_dict() == {"a": 1}

    def test_merging_a_node_does_not_alias_it(self):
        override = Node({"a": {"x": 1}})
        node = Node().deep_merge(override)
        node["a"]["x"] = 2
        assert override["a"]["x"] == 1

    def test_idempotent_with_own_materialization(self):
        data = {"a": {"b": [1, {"c": None}], "d": "x"}, "e": None}
        node = Node(data)
        node.deep_merge(node.to_dict())
        assert node == Node(data)


# ===========================================================================
# TestToDict
# ===========================================================================

class TestToDict:

    def test_round_trip(self):
        data = {
            "a": {"b": None, "c": [1, {"d": 2}, [3]]},
            "e": "x",
            "f": 1.5,
            "g": True,
        }
        assert Node(data).to_dict() == data

    def test_returns_plain_types(self):
        result = Node({"a": {"b": [{"c": 1}]}}).to_dict()
        assert type(result["a"]) is dict
        assert type(result["a"]["b"][0]) is dict


# ===========================================================================
# TestFreeze
# ===========================================================================

class TestFreeze:

    def test_writes_are_rejected_at_every_level(self):
        node = Node({"a": {"b": 1}}).freeze()
        assert node.frozen and node["a"].frozen
        with pytest.raises(ReadOnlyNode, match="cannot set 'x'"):
            node["x"] = 1
        with pytest.raises(ReadOnlyNode):
            node["a"]["b"] = 2
        with pytest.raises(ReadOnlyNode):
            node["a"].deep_merge({"b": 2})
        assert node.to_dict() == {"a": {"b": 1}}

    def test_read_only_is_a_configuration_error(self):
        with pytest.raises(ConfigurationError):
            Node().freeze().set("a", 1)

    def test_lists_become_tuples(self):
        node = Node({"locales": ["en", "de"], "nested": [{"a": 1}]}).freeze()
        assert node["locales"] == ("en", "de")
        assert node["nested"][0].frozen
        assert node.to_dict() == {"locales": ["en", "de"], "nested": [{"a": 1}]}

    def test_deferred_values_still_evaluate(self):
        node = Node({"mode": "katello"})
        node["is_katello"] = Deferred(lambda: node["mode"] == "katello")
        node.freeze()
        assert node["is_katello"] is True

    def test_copy_is_writable(self):
        frozen = Node({"a": {"b": 1}}).freeze()
        copy = frozen.copy()
        copy["a"]["b"] = 2
        assert not copy.frozen
        assert frozen["a"]["b"] == 1

    def test_frozen_node_can_be_merged_into_another(self):
        source = Node({"a": {"b": 1}}).freeze()
        target = Node({"a": {"c": 2}}).deep_merge(source)
        target["a"]["b"] = 3
        assert target.to_dict() == {"a": {"b": 3, "c": 2}}
        assert source["a"]["b"] == 1
