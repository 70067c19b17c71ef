"""Long-lived Lua session that runs the user script against each document"""

import sys
from typing import Any, Optional, TextIO

from lupa import LuaError, LuaRuntime, LuaSyntaxError

from fmfix.core.bridge import LuaBridge
from fmfix.core.emit import encode
from fmfix.core.errors import (
    ConversionError,
    EnvironmentBindingError,
    ScriptCompileError,
    ScriptRuntimeError,
)
from fmfix.core.models import FixedDocument, Frontmatter
from fmfix.core.parse import decode, parse_raw


def _deny_attribute(obj, attr_name, is_setting):
    raise AttributeError(f"access to Python attribute {attr_name!r} is not allowed")


class ScriptEngine:
    """One Lua runtime shared by every document in a run.

    Globals the script defines persist from one document to the next; only
    ``meta`` and ``content`` are rebound per document. When ``script`` is
    None the engine runs an interactive loop over ``stdin`` instead.
    """

    def __init__(
        self,
        script: Optional[str] = None,
        key_order: str = "preserve",
        max_memory: int = 0,
        stdin: Optional[TextIO] = None,
        stdout: Optional[TextIO] = None,
        stderr: Optional[TextIO] = None,
        ):
        self._stdin = stdin or sys.stdin
        self._stdout = stdout or sys.stdout
        self._stderr = stderr or sys.stderr

        try:
            self.lua = LuaRuntime(
                register_eval=False,
                register_builtins=False,
                attribute_filter=_deny_attribute,
                max_memory=max_memory or None,
            )
            self.bridge = LuaBridge(self.lua, key_order)
            g = self.lua.globals()
            g["null"] = self.bridge.null
            g["yaml_dump"] = self._yaml_dump
        except LuaError as e:
            raise EnvironmentBindingError(f"couldn't set up Lua runtime: {e}") from e

        self._script = self._compile(script) if script is not None else None

    @property
    def interactive(self) -> bool:
        return self._script is None

    def _compile(self, source: str) -> Any:
        try:
            return self.lua.compile(source)
        except LuaError as e:
            raise ScriptCompileError(f"Lua script didn't compile: {e}") from e

    def _yaml_dump(self, value=None) -> None:
        self._stdout.write(encode(self.bridge.from_engine(value, path="yaml_dump")) + "\n")

    # --- per-document contract ---

    def fix(self, text: str, strict: bool = False) -> FixedDocument:
        """Run the script over one document and return its final frontmatter and body."""
        block, body = parse_raw(text, strict=strict)
        frontmatter = decode(block)
        self.bind(frontmatter, body)
        self.execute()
        return FixedDocument(frontmatter=self.read_meta(frontmatter), body=body)

    def bind(self, frontmatter: Optional[Frontmatter], body: str) -> None:
        """Replace the per-document globals; ``meta`` is removed when there is no frontmatter."""
        g = self.lua.globals()
        try:
            del g["meta"]
            if frontmatter is not None:
                g["meta"] = self.bridge.to_engine(frontmatter.value)
            g["content"] = body
        except LuaError as e:
            raise EnvironmentBindingError(f"couldn't send document to Lua: {e}") from e

    def execute(self) -> None:
        if self.interactive:
            self.repl()
            return
        try:
            self._script()
        except Exception as e:
            raise ScriptRuntimeError(f"error in Lua script: {e}") from e

    def read_meta(self, original: Optional[Frontmatter] = None) -> Optional[Frontmatter]:
        """Convert ``meta`` back; None when the script removed it."""
        template = original.value if original is not None else None
        try:
            meta = self.lua.globals()["meta"]
            if meta is None:
                return None
            return Frontmatter(value=self.bridge.from_engine(meta, template=template))
        except UnicodeDecodeError as e:
            raise ConversionError(f"meta: Lua string is not valid UTF-8: {e}") from e
        except LuaError as e:
            raise EnvironmentBindingError(f"couldn't retrieve metadata from Lua: {e}") from e

    # --- interactive mode ---

    def repl(self) -> None:
        """Evaluate stdin line by line until EOF, reporting each result or error."""
        for line in iter(self._stdin.readline, ""):
            if not line.strip():
                continue
            try:
                result = self.evaluate(line)
            except Exception as e:
                self._stderr.write(f"Error: {e}\n")
                continue
            self._stdout.write(self.describe(result) + "\n")

    def evaluate(self, line: str) -> Any:
        """Evaluate a line as an expression, falling back to a statement."""
        try:
            return self.lua.eval(line)
        except LuaSyntaxError:
            return self.lua.execute(line)

    def describe(self, value: Any) -> str:
        if isinstance(value, tuple):
            return ", ".join(self.describe(v) for v in value)
        if value is None:
            return "nil"
        if isinstance(value, bool):
            return "true" if value else "false"
        try:
            converted = self.bridge.from_engine(value, path="value")
        except (ConversionError, UnicodeDecodeError):
            return str(value)
        return "null" if converted is None else repr(converted)
