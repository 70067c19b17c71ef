"""Unit tests for core/bridge.py"""

import datetime

import pytest
from lupa import LuaError, LuaRuntime

from fmfix.core.bridge import LuaBridge
from fmfix.core.errors import ConversionError


@pytest.fixture(name="lua")
def lua_fixture():
    return LuaRuntime()


@pytest.fixture(name="bridge")
def bridge_fixture(lua):
    return LuaBridge(lua)


# --- round trip ---

@pytest.mark.parametrize("value", [
    {"hello": "world"},
    {"tags": [], "extra": {}},
    {1: "a", 2: "b"},
    {"x": None, "list": [1, None, 3]},
    {"n": 1, "f": 1.5, "yes": True, "no": False, "s": ""},
    ["a", {"b": [1, 2]}, []],
    {"nested": {"deeper": {"deepest": ["x"]}}},
    None,
    "scalar",
    3.5,
])
def test_round_trip(bridge, value):
    """from_engine(to_engine(v)) == v for every decodable shape."""
    assert bridge.from_engine(bridge.to_engine(value), template=value) == value


def test_round_trip_keeps_number_types(bridge):
    """Lua integers and floats stay distinct."""
    value = {"i": 1, "f": 1.0}
    result = bridge.from_engine(bridge.to_engine(value), template=value)
    assert type(result["i"]) is int
    assert type(result["f"]) is float


def test_round_trip_keeps_key_order(bridge):
    value = {"zebra": 1, "apple": 2, "mango": 3}
    result = bridge.from_engine(bridge.to_engine(value), template=value)
    assert list(result) == ["zebra", "apple", "mango"]


def test_empty_containers_keep_their_kind(bridge):
    """Marker metatables tell an empty list from an empty mapping."""
    assert bridge.from_engine(bridge.to_engine([])) == []
    assert bridge.from_engine(bridge.to_engine({})) == {}


# --- tables built by scripts ---

def test_script_array_becomes_list(lua, bridge):
    assert bridge.from_engine(lua.eval("{1, 2, 3}")) == [1, 2, 3]


def test_script_record_becomes_mapping(lua, bridge):
    assert bridge.from_engine(lua.eval("{a = 1, b = 'two'}")) == {"a": 1, "b": "two"}


def test_script_empty_table_becomes_mapping(lua, bridge):
    assert bridge.from_engine(lua.eval("{}")) == {}


def test_script_sparse_table_becomes_mapping(lua, bridge):
    assert bridge.from_engine(lua.eval("{[1] = 'a', [3] = 'c'}")) == {1: "a", 3: "c"}


def test_script_null_global_maps_to_none(lua, bridge):
    assert bridge.from_engine(lua.eval("function(null) return {x = null} end")(bridge.null)) == {"x": None}


def test_appended_sequence_items(lua, bridge):
    """table.insert on a bridged list is read back in order."""
    tags = bridge.to_engine(["a"])
    lua.eval("function(t) table.insert(t, 'b') end")(tags)
    assert bridge.from_engine(tags) == ["a", "b"]


def test_sequence_hole_reads_as_none(lua, bridge):
    tags = bridge.to_engine(["a", "b", "c"])
    lua.eval("function(t) t[2] = nil end")(tags)
    assert bridge.from_engine(tags) == ["a", None, "c"]


def test_sequence_with_string_key_becomes_mapping(lua, bridge):
    tags = bridge.to_engine(["a"])
    lua.eval("function(t) t.extra = true end")(tags)
    assert bridge.from_engine(tags) == {1: "a", "extra": True}


def test_null_sentinel_is_frozen(lua, bridge):
    with pytest.raises(LuaError):
        lua.eval("function(n) n.x = 1 end")(bridge.null)


# --- key ordering ---

def test_preserve_appends_new_keys_sorted(lua, bridge):
    original = {"zebra": 1, "apple": 2}
    table = bridge.to_engine(original)
    lua.eval("function(t) t.mango = 3; t.banana = 4 end")(table)
    result = bridge.from_engine(table, template=original)
    assert list(result) == ["zebra", "apple", "banana", "mango"]


def test_preserve_drops_removed_keys(lua, bridge):
    original = {"a": 1, "b": 2, "c": 3}
    table = bridge.to_engine(original)
    lua.eval("function(t) t.b = nil end")(table)
    assert list(bridge.from_engine(table, template=original)) == ["a", "c"]


def test_preserve_applies_to_nested_mappings(bridge):
    original = {"outer": {"z": 1, "a": 2}, "list": [{"y": 1, "b": 2}]}
    result = bridge.from_engine(bridge.to_engine(original), template=original)
    assert list(result["outer"]) == ["z", "a"]
    assert list(result["list"][0]) == ["y", "b"]


def test_sort_key_order(lua):
    bridge = LuaBridge(lua, key_order="sort")
    original = {"zebra": 1, "apple": 2}
    assert list(bridge.from_engine(bridge.to_engine(original), template=original)) == ["apple", "zebra"]


def test_invalid_key_order(lua):
    with pytest.raises(ValueError):
        LuaBridge(lua, key_order="random")


# --- conversion failures ---

def test_function_is_not_convertible(lua, bridge):
    with pytest.raises(ConversionError, match="function"):
        bridge.from_engine(lua.eval("print"))


def test_nested_failure_names_path(lua, bridge):
    with pytest.raises(ConversionError, match=r"meta\.a\.b"):
        bridge.from_engine(lua.eval("{a = {b = print}}"))


def test_coroutine_is_not_convertible(lua, bridge):
    """Depending on the lupa build a coroutine surfaces as a thread or a function."""
    with pytest.raises(ConversionError, match="cannot represent a Lua (thread|function)"):
        bridge.from_engine(lua.eval("coroutine.create(function() end)"))


def test_python_object_is_not_convertible(bridge):
    with pytest.raises(ConversionError):
        bridge.from_engine(object())


def test_table_key_is_not_convertible(lua, bridge):
    with pytest.raises(ConversionError, match="keys"):
        bridge.from_engine(lua.eval("{[{}] = 1}"))


def test_unsupported_python_value(bridge):
    with pytest.raises(ConversionError):
        bridge.to_engine({"when": datetime.date(2026, 1, 15)})


def test_integer_outside_lua_range(bridge):
    with pytest.raises(ConversionError, match="Lua integer"):
        bridge.to_engine(2 ** 64)


def test_conversion_error_is_a_type_error(bridge):
    with pytest.raises(TypeError):
        bridge.to_engine({1, 2})
