"""Exception hierarchy: run-level vs per-document failures"""


class FmfixError(Exception):
    """Base class for all fmfix errors."""


class ScriptCompileError(FmfixError):
    """The Lua script failed to compile. Fatal to the whole run."""


class DocumentError(FmfixError):
    """A failure scoped to one document; the batch continues with the next."""


class DocumentReadError(DocumentError):
    pass


class DocumentWriteError(DocumentError):
    pass


class DecodeError(DocumentError, ValueError):
    """The frontmatter block is not a single well-formed YAML document."""


class UnclosedFrontmatterError(DecodeError):
    """Leading delimiter without a closing one (strict mode only)."""


class ScriptRuntimeError(DocumentError):
    pass


class ConversionError(DocumentError, TypeError):
    """A value has no counterpart on the other side of the Lua bridge."""


class EnvironmentBindingError(DocumentError):
    """The Lua runtime rejected a host binding operation."""
