"""
Data models for the math/text atom converter
"""

from dataclasses import dataclass, field, fields, replace
from typing import List, Optional, Dict, Any
from enum import Enum


# Index 0 is reserved: font sizes are numbered 1..10.
FONT_SIZE_COMMANDS = [
    '',
    'tiny',
    'scriptsize',
    'footnotesize',
    'small',
    'normalsize',
    'large',
    'Large',
    'LARGE',
    'huge',
    'Huge',
]

# Outer-to-inner order used when wrapping style runs.
STYLE_PROPERTIES = (
    'background_color',
    'color',
    'font_family',
    'font_size',
    'font_series',
    'font_shape',
)


@dataclass(frozen=True)
class Style:
    """Typographic properties attached to an atom.

    A field left as ``None`` inherits from the enclosing context; it never
    means "reset to the default".
    """
    color: Optional[str] = None
    verbatim_color: Optional[str] = None
    background_color: Optional[str] = None
    verbatim_background_color: Optional[str] = None
    font_family: Optional[str] = None  # roman, sans-serif, monospace or other
    font_series: Optional[str] = None  # TeX series code: b, l, m, sbc, ...
    font_shape: Optional[str] = None  # it, sl, sc, n or other
    font_size: Optional[int] = None  # 1..10, see FONT_SIZE_COMMANDS

    def merge(self, other: 'Style') -> 'Style':
        """Return a copy where every field set on ``other`` wins."""
        changes = {
            f.name: getattr(other, f.name)
            for f in fields(other)
            if getattr(other, f.name) is not None
        }
        return replace(self, **changes) if changes else self

    def updated(self, **changes) -> 'Style':
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @property
    def is_empty(self) -> bool:
        return all(getattr(self, f.name) is None for f in fields(self))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary, omitting unset fields."""
        return {
            f.name: getattr(self, f.name)
            for f in fields(self)
            if getattr(self, f.name) is not None
        }

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> 'Style':
        if not data:
            return cls()
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})


class ParserErrorCode(Enum):
    """Codes reported through the parser error sink."""
    UNEXPECTED_TOKEN = "unexpected-token"
    UNTERMINATED_MATH_SHIFT = "unterminated-math-shift"
    MISSING_ARGUMENT = "missing-argument"
    UNBALANCED_BRACES = "unbalanced-braces"


@dataclass
class ParseError:
    """A recoverable problem found while parsing a token stream."""
    code: ParserErrorCode
    arg: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {'code': self.code.value, 'arg': self.arg}


class LaTeXParseError(ValueError):
    """Raised by the converter in strict mode once parsing has finished."""

    def __init__(self, errors: List[ParseError]):
        self.errors = list(errors)
        summary = ', '.join(
            f"{e.code.value}({e.arg})" if e.arg else e.code.value
            for e in self.errors
        )
        super().__init__(f"LaTeX parse failed: {summary}")


@dataclass
class ParseResult:
    """Result of converting LaTeX source to atoms."""
    atoms: List[Any] = field(default_factory=list)
    errors: List[ParseError] = field(default_factory=list)
    mode: str = "math"

    @property
    def is_valid(self) -> bool:
        """Check if parsing reported no errors."""
        return len(self.errors) == 0

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            'mode': self.mode,
            'atoms': [atom.to_json() for atom in self.atoms],
            'errors': [e.to_dict() for e in self.errors],
            'success': self.is_valid,
        }
