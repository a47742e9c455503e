"""Go Stack Analyzer package.

Recovers structured data from the stack dumps the Go runtime prints on
panic, deadlock or SIGQUIT:
- Goroutine headers (id, state, wait time, thread locking)
- Call stacks with file:line locations
- "created by" frames and "originating from" ancestor chains
- Per-line parse errors that drop only the goroutine they occur in
"""
from .models import (
    Frame,
    Goroutine,
    ErrorKind,
    ParseError,
    ParseResult,
)
from .parser import (
    GoroutineParser,
    ParserState,
    parse,
)
from .config import (
    ConfigError,
    Settings,
    load_settings,
)

__all__ = [
    # Data model
    "Frame",
    "Goroutine",
    "ErrorKind",
    "ParseError",
    "ParseResult",
    # Parser
    "GoroutineParser",
    "ParserState",
    "parse",
    # Configuration
    "ConfigError",
    "Settings",
    "load_settings",
]

__version__ = "1.0.0"
