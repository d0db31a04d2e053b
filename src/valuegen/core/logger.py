import logging
import sys
import contextvars
from typing import Optional

# Context variable to carry the declaration currently being processed
_DECLARATION: contextvars.ContextVar[str] = contextvars.ContextVar("declaration", default="-")


class _DeclarationFilter(logging.Filter):
    """Logging filter that injects the current declaration name from contextvars into the record."""

    def filter(self, record: logging.LogRecord) -> bool:  # type: ignore[override]
        record.declaration = _DECLARATION.get()
        return True


def _build_formatter() -> logging.Formatter:
    return logging.Formatter(
        fmt="%(asctime)s | %(levelname)-8s | %(name)s | decl=%(declaration)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )


def configure_root_logger(level: str = "WARNING") -> None:
    """
    Configure root logger and valuegen-specific logger.

    Logs go to stderr so generated code written to stdout stays clean.
    Only the valuegen namespace is set to the requested level.

    Args:
        level: Log level for valuegen logs (DEBUG, INFO, WARNING, ERROR).

    Safe to call multiple times; it will not duplicate handlers (idempotent).
    """
    root = logging.getLogger()
    valuegen_logger = logging.getLogger("valuegen")

    # Check if we already configured our handler (has _DeclarationFilter)
    for h in root.handlers:
        if isinstance(h, logging.StreamHandler) and any(isinstance(f, _DeclarationFilter) for f in h.filters):
            valuegen_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))
            return

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(_build_formatter())
    handler.addFilter(_DeclarationFilter())
    root.addHandler(handler)

    valuegen_logger.setLevel(getattr(logging, level.upper(), logging.WARNING))


def get_logger(name: str = "valuegen") -> logging.Logger:
    """
    Get a module-specific logger. Levels are inherited from the ``valuegen`` logger.
    """
    return logging.getLogger(name)


def push_declaration(name: Optional[str]) -> Optional[contextvars.Token]:
    """Set the current declaration in context and return a token for later reset."""
    if not name:
        return None
    return _DECLARATION.set(name)


def reset_declaration(token: Optional[contextvars.Token]) -> None:
    """Reset the declaration context using the provided token (if any)."""
    if token is None:
        return
    _DECLARATION.reset(token)
