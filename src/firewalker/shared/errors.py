"""
Error Reporting

Diagnostics for binding failures plus the exception hierarchy raised by the
binder and the bound-tree visitor.

Error taxonomy:
- UnsupportedConstructError: recognized but intentionally unimplemented
- UnresolvedReferenceError: a name missing from the symbol environment
- MalformedInputError: structural violations caught at bind time
- ScopeError: count index referenced outside a count scope
- FirewalkerImplementationError: internal invariant violations (compiler bugs)
"""

import os
import sys
from dataclasses import dataclass
from typing import Optional, List, Dict
from .source_location import SourceLocation


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get("NO_COLOR"):
        return False
    explicit = os.environ.get("FIREWALKER_COLOR", "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD  = "\033[1m"
_RED   = "\033[31m"
_BLUE  = "\033[34m"
_CYAN  = "\033[36m"
_RESET = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color or not codes:
        return text
    return "".join(codes) + text + _RESET


# ---------------------------------------------------------------------------
# Error record
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """A single reported diagnostic."""
    message: str
    location: Optional[SourceLocation]
    code: Optional[str] = None
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting
# ---------------------------------------------------------------------------

def _format_diagnostic(
    error: Error,
    source_files: Dict[str, str],
    color: bool = False,
) -> str:
    """
    Render a diagnostic in rustc style::

        error[E0425]: unknown resource aws_instance.web
         --> main.tf:12:14
          |
        12 |   ami = "${aws_instance.web.ami}"
           |              ^^^^^^^^^^^^^^^^^^^^
    """
    code = f"[{error.code}]" if error.code else ""
    out: List[str] = [
        _style(f"error{code}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    ]

    loc = error.location
    if loc is None:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + "<unknown location>")
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    source = source_files.get(loc.file)
    lines = source.split("\n") if source is not None else []
    if not 0 < loc.line <= len(lines):
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + str(loc))
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    gw = len(str(loc.line))
    gutter = _style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color)
    code_line = lines[loc.line - 1]

    out.append(_style(" " * gw + "--> ", _BOLD, _BLUE, color=color) + str(loc))
    out.append(gutter)
    out.append(_style(f"{loc.line} | ", _BOLD, _BLUE, color=color) + code_line)

    start = max(loc.column, 1) - 1
    if loc.end_line in (0, loc.line) and loc.end_column > loc.column:
        width = loc.end_column - loc.column
    else:
        width = _guess_span(code_line, start)
    carets = " " * start + "^" * max(1, width)
    if error.label:
        carets += f" {error.label}"
    out.append(gutter + " " + _style(carets, _BOLD, _RED, color=color))

    _append_annotations(out, error, gw, color)
    return "\n".join(out)


def _guess_span(code_line: str, start: int) -> int:
    """Length of the token at start, ending at the interpolation delimiter."""
    length = 0
    for ch in code_line[start:]:
        if ch in (" ", "\t", "}", ",", ")", "]", '"'):
            break
        length += 1
    return max(1, length)


def _append_annotations(out: List[str], error: Error, gw: int, color: bool) -> None:
    if not (error.help or error.note):
        return
    pad = " " * (gw + 1)
    out.append(_style(pad + "|", _BOLD, _BLUE, color=color))
    for kind, text in (("help", error.help), ("note", error.note)):
        if text:
            out.append(
                _style(f"{pad}= ", _BOLD, _CYAN, color=color)
                + _style(f"{kind}: ", _BOLD, color=color)
                + text
            )


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """Collects diagnostics for a compilation and formats them on demand."""

    def __init__(self, source_files: Optional[Dict[str, str]] = None):
        self.source_files = source_files if source_files is not None else {}
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        location: Optional[SourceLocation],
        code: Optional[str] = None,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(message, location, code, help, note, label))

    def report_exception(self, exc: "FirewalkerSourceError") -> None:
        self.report_error(
            exc.message,
            exc.location,
            code=exc.error_code,
            help=exc.help_text,
            note=exc.note_text,
        )

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.source_files, color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        parts = [self.format_error(e, color=use_color) for e in self.errors]
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(
            _style("error", _BOLD, _RED, color=use_color)
            + _style(f": {summary}", _BOLD, color=use_color)
        )
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def print_errors(self) -> None:
        if self.errors:
            print(self.format_all_errors(), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class FirewalkerError(Exception):
    """Base exception for all firewalker errors"""
    def __init__(self, message: str, location: Optional[SourceLocation] = None):
        super().__init__(message)
        self.message = message
        self.location = location

    def __str__(self):
        if self.location:
            return f"{self.message} ({self.location})"
        return self.message


class FirewalkerSourceError(FirewalkerError):
    """
    Error in the user's configuration (as opposed to a compiler bug).

    Subclasses fix the error code; the message names the offending construct.
    """
    error_code = "E0001"

    def __init__(self,
                 message: str,
                 location: Optional[SourceLocation] = None,
                 help: Optional[str] = None,
                 note: Optional[str] = None):
        super().__init__(message, location)
        self.help_text = help
        self.note_text = note

    def to_error(self) -> Error:
        return Error(
            message=self.message,
            location=self.location,
            code=self.error_code,
            help=self.help_text,
            note=self.note_text,
        )


class UnsupportedConstructError(FirewalkerSourceError):
    """A reference, function or variable kind that is recognized but not implemented."""
    error_code = "E0658"


class UnresolvedReferenceError(FirewalkerSourceError):
    """A resource, module, local, variable, provider or function that does not exist."""
    error_code = "E0425"


class MalformedInputError(FirewalkerSourceError):
    """Structural violation caught at bind time."""
    error_code = "E0001"


class ScopeError(FirewalkerSourceError):
    """A count index referenced outside of a count scope."""
    error_code = "E0434"


class FirewalkerImplementationError(Exception):
    """
    Error in firewalker itself (not in the user's configuration).

    Raised for internal invariant violations: a bound node class with no
    traversal case, or a visitor that breaks the rewrite contract.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
