"""
Error Reporting

rustc-style diagnostics for one-line expressions: a header, an arrow naming
the input, the input line, and a caret under every offending character.
"""

import os
import sys
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence

from .source_location import SourceSpan
from .tokens import Token
from ..utils.config import (
    COLOR_ENV_VAR,
    DEFAULT_INPUT_NAME,
    ERROR_POINTER_CHAR,
    NO_COLOR_ENV_VAR,
)


# ---------------------------------------------------------------------------
# ANSI color helpers (disabled when NO_COLOR is set)
# ---------------------------------------------------------------------------

def _use_color() -> bool:
    if os.environ.get(NO_COLOR_ENV_VAR):
        return False
    explicit = os.environ.get(COLOR_ENV_VAR, "").lower()
    if explicit in ("0", "false", "no", "never"):
        return False
    return True

_BOLD   = "\033[1m"
_RED    = "\033[31m"
_BLUE   = "\033[34m"
_CYAN   = "\033[36m"
_RESET  = "\033[0m"

def _style(text: str, *codes: str, color: bool = True) -> str:
    if not color:
        return text
    prefix = "".join(codes)
    return f"{prefix}{text}{_RESET}" if prefix else text


# ---------------------------------------------------------------------------
# Error dataclass
# ---------------------------------------------------------------------------

@dataclass
class Error:
    """A diagnostic: message plus the source spans it points at."""
    message: str
    spans: List[SourceSpan] = field(default_factory=list)
    code: Optional[str] = None
    input_name: str = DEFAULT_INPUT_NAME
    help: Optional[str] = None
    note: Optional[str] = None
    label: Optional[str] = None


# ---------------------------------------------------------------------------
# Formatting engine
# ---------------------------------------------------------------------------

def caret_line(spans: Iterable[SourceSpan], width: int = 0) -> str:
    """
    Marker line with a caret beneath every offset covered by ``spans``.

    Empty spans (the end-of-input sentinel) mark the offset they start at.
    """
    marked = set()
    for span in spans:
        if len(span) > 0:
            marked.update(span.offsets)
        else:
            marked.add(span.start)
    if not marked:
        return ""
    length = max(width, max(marked) + 1)
    return "".join(ERROR_POINTER_CHAR if i in marked else " " for i in range(length)).rstrip()


def _format_diagnostic(error: Error, source: Optional[str], color: bool = False) -> str:
    """
    Render a single diagnostic.

    Example output (plain, no color)::

        error[E0103]: mismatched grouping symbols: `(` closed by `]`
         --> <input>:1:1
          |
        1 | ( 1 + 2 ]
          | ^       ^ expected `)`
    """
    out: List[str] = []

    code_str = f"[{error.code}]" if error.code else ""
    out.append(
        _style(f"error{code_str}", _BOLD, _RED, color=color)
        + _style(f": {error.message}", _BOLD, color=color)
    )

    if not error.spans:
        out.append(_style(" --> ", _BOLD, _BLUE, color=color) + error.input_name)
        _append_annotations(out, error, 1, color)
        return "\n".join(out)

    first = min(error.spans, key=lambda s: s.start)
    line_no = first.line
    gw = max(len(str(line_no)), 1)

    out.append(
        _style(" " * gw + "--> ", _BOLD, _BLUE, color=color)
        + f"{error.input_name}:{first}"
    )

    if source is None:
        _append_annotations(out, error, gw, color)
        return "\n".join(out)

    src_lines = source.split("\n")
    code_line = src_lines[line_no - 1] if 0 < line_no <= len(src_lines) else ""

    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    out.append(_style(str(line_no).rjust(gw) + " | ", _BOLD, _BLUE, color=color) + code_line)
    carets = caret_line(error.spans)
    label_suffix = f" {error.label}" if error.label else ""
    out.append(
        _style(" " * (gw + 1) + "| ", _BOLD, _BLUE, color=color)
        + _style(carets + label_suffix, _BOLD, _RED, color=color)
    )

    _append_annotations(out, error, gw, color)
    return "\n".join(out)


def _append_annotations(out: List[str], error: Error, gw: int, color: bool) -> None:
    if not (error.help or error.note):
        return
    out.append(_style(" " * (gw + 1) + "|", _BOLD, _BLUE, color=color))
    pad = " " * (gw + 1)
    if error.help:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("help: ", _BOLD, color=color)
            + error.help
        )
    if error.note:
        out.append(
            _style(f"{pad}= ", _BOLD, _CYAN, color=color)
            + _style("note: ", _BOLD, color=color)
            + error.note
        )


# ---------------------------------------------------------------------------
# ErrorReporter
# ---------------------------------------------------------------------------

class ErrorReporter:
    """
    Collects diagnostics for a session and formats them against the input
    lines they were raised for.
    """

    def __init__(self, sources: Optional[Dict[str, str]] = None):
        self.sources: Dict[str, str] = dict(sources or {})
        self.errors: List[Error] = []

    def report_error(
        self,
        message: str,
        spans: Sequence[SourceSpan] = (),
        code: Optional[str] = None,
        input_name: str = DEFAULT_INPUT_NAME,
        help: Optional[str] = None,
        note: Optional[str] = None,
        label: Optional[str] = None,
    ) -> None:
        self.errors.append(Error(
            message=message,
            spans=list(spans),
            code=code,
            input_name=input_name,
            help=help,
            note=note,
            label=label,
        ))

    def report_parse_error(self, exc: "ParseError", source: str, input_name: str = DEFAULT_INPUT_NAME) -> None:
        self.sources[input_name] = source
        error = exc.to_error()
        error.input_name = input_name
        self.errors.append(error)

    def format_error(self, error: Error, color: Optional[bool] = None) -> str:
        use_color = color if color is not None else _use_color()
        return _format_diagnostic(error, self.sources.get(error.input_name), color=use_color)

    def format_all_errors(self, color: Optional[bool] = None) -> str:
        parts = [self.format_error(e, color=color) for e in self.errors]
        use_color = color if color is not None else _use_color()
        count = len(self.errors)
        summary = f"aborting due to {count} previous error{'s' if count != 1 else ''}"
        parts.append(
            _style("error", _BOLD, _RED, color=use_color)
            + _style(f": {summary}", _BOLD, color=use_color)
        )
        return "\n\n".join(parts)

    def has_errors(self) -> bool:
        return len(self.errors) > 0

    def clear(self) -> None:
        self.errors.clear()

    def print_errors(self) -> None:
        color = _use_color()
        for error in self.errors:
            print(self.format_error(error, color=color), file=sys.stderr)


# ============================================================================
# Exception Classes
# ============================================================================

class OpparseError(Exception):
    """Base exception for all opparse errors"""
    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GrammarDefinitionError(OpparseError):
    """
    Malformed grammar: precedence/associativity count mismatch, overlapping
    symbols, bad arity or associativity, or an unparsable grammar-file line.
    """
    code = "E0200"

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column

    def __str__(self):
        if self.line is not None:
            return f"error[{self.code}]: {self.message} (line {self.line}, column {self.column})"
        return f"error[{self.code}]: {self.message}"


class ParseError(OpparseError):
    """
    A failed parse: message plus the offending tokens, rendered as a caret
    diagnostic beneath the input line.
    """
    code = "E0100"
    label: Optional[str] = None

    def __init__(self, message: str, *tokens: Token, help: Optional[str] = None):
        super().__init__(message)
        self.tokens = tokens
        self.help_text = help

    @property
    def token_indices(self) -> List[int]:
        return [t.index for t in self.tokens if t.index >= 0]

    @property
    def spans(self) -> List[SourceSpan]:
        return [t.span for t in self.tokens if t.span is not None]

    @property
    def offsets(self) -> List[int]:
        """Source character offsets of the offending tokens."""
        result = []
        for span in self.spans:
            result.extend(span.offsets if len(span) else [span.start])
        return sorted(set(result))

    def to_error(self) -> Error:
        return Error(
            message=self.message,
            spans=self.spans,
            code=self.code,
            help=self.help_text,
            label=self.label,
        )

    def format(self, source: str, color: bool = False, input_name: str = DEFAULT_INPUT_NAME) -> str:
        error = self.to_error()
        error.input_name = input_name
        return _format_diagnostic(error, source, color=color)

    def __str__(self):
        return f"error[{self.code}]: {self.message}"


class ExpressionSyntaxError(ParseError):
    """Two adjacent tokens whose kinds may not follow each other."""
    code = "E0100"


class UnmatchedOpenGroupError(ParseError):
    """An opening bracket still open at end of input."""
    code = "E0101"
    label = "unclosed"


class UnmatchedCloseGroupError(ParseError):
    """A closing bracket with no opening bracket pending."""
    code = "E0102"
    label = "unexpected"


class MismatchedGroupersError(ParseError):
    """A closing bracket that does not pair with the innermost opening one."""
    code = "E0103"


class StructuralUnderflowError(ParseError):
    """A stack pop on an empty stack, or operands left over after the tree is built."""
    code = "E0104"


class ImplementationError(Exception):
    """
    Error in opparse's own code, never in the user's input.
    """
    def __init__(self, message: str, error_code: str = "E9999"):
        super().__init__(message)
        self.message = message
        self.error_code = error_code

    def __str__(self):
        return f"[{self.error_code}] {self.message}"
