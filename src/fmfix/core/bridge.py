"""Bidirectional conversion between structured metadata and Lua values.

Lua has a single table type, so sequences and mappings produced on the
Python side are tagged with marker metatables. That keeps the conversion
lossless for empty containers and integer-keyed mappings. Tables that the
script builds itself carry no marker and are classified by their keys.

YAML null cannot be stored as Lua ``nil`` (assigning nil removes the slot),
so it is represented by a frozen sentinel table that the engine exposes to
scripts as the global ``null``.
"""

from typing import Any

from lupa import LuaRuntime, lua_type

from fmfix.core.errors import ConversionError


KEY_ORDERS = ("preserve", "sort")

LUA_INTEGER_MIN = -(2 ** 63)
LUA_INTEGER_MAX = 2 ** 63 - 1

PRELUDE = """
local null = setmetatable({}, {
  __name = "null",
  __tostring = function() return "null" end,
  __newindex = function() error("attempt to modify null", 2) end,
  __metatable = false,
})
local sequence_mt = { __name = "sequence" }
local mapping_mt = { __name = "mapping" }

local function as_sequence(t) return setmetatable(t, sequence_mt) end
local function as_mapping(t) return setmetatable(t, mapping_mt) end

local function shape(v)
  if rawequal(v, null) then return "null", 0 end
  if type(v) ~= "table" then return type(v), 0 end
  local mt = getmetatable(v)
  if mt == mapping_mt then return "mapping", 0 end
  local count, max = 0, 0
  for k in pairs(v) do
    if math.type(k) ~= "integer" or k < 1 then return "mapping", 0 end
    if k > max then max = k end
    count = count + 1
  end
  if mt == sequence_mt then return "sequence", max end
  if count > 0 and count == max then return "sequence", max end
  return "mapping", 0
end

return null, as_sequence, as_mapping, shape
"""


def _sort_key(key: Any) -> tuple[str, Any]:
    return type(key).__name__, key


class LuaBridge:
    """Converts values for one LuaRuntime; sentinels are per runtime."""

    def __init__(self, lua: LuaRuntime, key_order: str = "preserve"):
        if key_order not in KEY_ORDERS:
            raise ValueError(f"key_order must be one of {KEY_ORDERS}, got {key_order!r}")
        self.lua = lua
        self.key_order = key_order
        self.null, self._as_sequence, self._as_mapping, self._shape = lua.execute(PRELUDE)

    # --- Python -> Lua ---

    def to_engine(self, value: Any, path: str = "meta") -> Any:
        if value is None:
            return self.null
        if isinstance(value, (bool, float, str)):
            return value
        if isinstance(value, int):
            if not LUA_INTEGER_MIN <= value <= LUA_INTEGER_MAX:
                raise ConversionError(f"{path}: integer {value} does not fit a Lua integer")
            return value
        if isinstance(value, list):
            items = [self.to_engine(v, f"{path}[{i}]") for i, v in enumerate(value, start=1)]
            return self._as_sequence(self.lua.table_from(items))
        if isinstance(value, dict):
            table = self._as_mapping(self.lua.table())
            for k, v in value.items():
                table[self.to_engine(k, path)] = self.to_engine(v, f"{path}.{k}")
            return table
        raise ConversionError(f"{path}: cannot pass {type(value).__name__} to Lua")

    # --- Lua -> Python ---

    def from_engine(self, value: Any, template: Any = None, path: str = "meta") -> Any:
        """Convert a Lua value back, ordering mapping keys after `template`."""
        if value is None or isinstance(value, (bool, int, float, str)):
            return value
        if isinstance(value, bytes):
            raise ConversionError(f"{path}: Lua string is not valid UTF-8")

        kind = lua_type(value)
        if kind is None:
            raise ConversionError(f"{path}: cannot represent Python {type(value).__name__} as metadata")
        if kind != "table":
            raise ConversionError(f"{path}: cannot represent a Lua {kind} as metadata")

        shape, length = self._shape(value)
        if shape == "null":
            return None
        if shape == "sequence":
            hint = template if isinstance(template, list) else []
            return [
                self.from_engine(
                    value[i],
                    hint[i - 1] if i <= len(hint) else None,
                    f"{path}[{i}]",
                )
                for i in range(1, length + 1)
            ]
        return self._mapping_from_engine(value, template, path)

    def _mapping_from_engine(self, table: Any, template: Any, path: str) -> dict:
        hint = template if isinstance(template, dict) else {}
        converted: dict = {}
        for k, v in table.items():
            key = self.from_engine(k, path=path)
            if isinstance(key, (list, dict)):
                raise ConversionError(f"{path}: table keys cannot be used as metadata keys")
            converted[key] = self.from_engine(v, hint.get(key), f"{path}.{key}")
        return {key: converted[key] for key in self._ordered_keys(converted, hint)}

    def _ordered_keys(self, converted: dict, hint: dict) -> list:
        if self.key_order == "sort":
            return sorted(converted, key=_sort_key)
        known = [key for key in hint if key in converted]
        added = sorted((key for key in converted if key not in hint), key=_sort_key)
        return known + added
