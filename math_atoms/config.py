"""
Configuration classes for the math/text atom converter
"""

from dataclasses import dataclass, field, replace
from typing import Optional, Dict, Any
from pathlib import Path

from .models import Style


@dataclass
class ParseOptions:
    """Options threaded through every mode parser and the dispatcher."""
    # Style given to atoms created at this point of the parse
    style: Style = field(default_factory=Style)

    # User macros: control-word name (without backslash) -> replacement source
    macros: Dict[str, str] = field(default_factory=dict)

    # Mode-aware dispatcher (parser.Parser); mode parsers call back into it
    dispatcher: Optional[Any] = None

    # Symbol table (definitions.SymbolTable); None means the built-in one
    symbols: Optional[Any] = None

    def with_style(self, **changes) -> 'ParseOptions':
        """Copy of these options with some style fields replaced."""
        return replace(self, style=self.style.updated(**changes))

    def parse(self, mode: str, tokens, error):
        """Delegate a token span to the dispatcher."""
        if self.dispatcher is None:
            raise RuntimeError("ParseOptions.dispatcher is not set")
        return self.dispatcher.parse(mode, tokens, error, self)

    def parse_all(self, mode: str, tokens, error):
        """Delegate a whole token span to the dispatcher."""
        if self.dispatcher is None:
            raise RuntimeError("ParseOptions.dispatcher is not set")
        return self.dispatcher.parse_all(mode, tokens, error, self)


@dataclass
class SerializeOptions:
    """Serialization options."""
    # Do not wrap text runs in \text{...}
    skip_mode_command: bool = False

    # Mode of the enclosing context: text runs in a text context never need
    # \text{...}, math runs in a text context need $...$
    default_mode: str = "math"

    # modes.ModeRegistry; None means the default one
    registry: Optional[Any] = None


@dataclass
class ConverterConfig:
    """Main converter configuration."""
    # General settings
    verbose: bool = False
    debug: bool = False

    # Parsing
    default_mode: str = "math"
    strict: bool = False
    macros: Dict[str, str] = field(default_factory=dict)

    # Extra symbols (YAML or JSON)
    symbol_table_path: Optional[Path] = None

    def __post_init__(self):
        """Initialize paths."""
        if self.symbol_table_path:
            self.symbol_table_path = Path(self.symbol_table_path)
        if self.default_mode not in ('math', 'text'):
            raise ValueError(f"Unsupported default mode: {self.default_mode}")
