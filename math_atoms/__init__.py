"""
Math Atoms

Converts LaTeX-like math/text source into a tree of typed atoms and
serializes atom trees back into minimal LaTeX.
"""

__version__ = "0.1.0"
__author__ = "Math Atoms Team"

# Import các models
from .models import (
    Style,
    ParseError,
    ParserErrorCode,
    ParseResult,
    LaTeXParseError,
    FONT_SIZE_COMMANDS,
)

# Import các configuration classes
from .config import (
    ConverterConfig,
    ParseOptions,
    SerializeOptions,
)

# Import core components
from .atoms import Atom, TextAtom, GroupAtom, BoxAtom, atom_from_json
from .delimiters import DelimAtom, SizedDelimAtom
from .boxes import Box, RenderContext
from .tokenizer import tokenize, join_latex
from .definitions import SymbolTable, SymbolDefinition, lookup, char_to_latex
from .modes import (
    Mode,
    ModeRegistry,
    TextMode,
    MathMode,
    default_registry,
    get_property_runs,
    serialize_atoms,
)
from .parser import Parser

# Import main converter
from .converter import LaTeXConverter

# Export tất cả public APIs
__all__ = [
    # Version
    "__version__",

    # Models
    "Style",
    "ParseError",
    "ParserErrorCode",
    "ParseResult",
    "LaTeXParseError",
    "FONT_SIZE_COMMANDS",

    # Configurations
    "ConverterConfig",
    "ParseOptions",
    "SerializeOptions",

    # Atoms
    "Atom",
    "TextAtom",
    "GroupAtom",
    "BoxAtom",
    "DelimAtom",
    "SizedDelimAtom",
    "atom_from_json",
    "Box",
    "RenderContext",

    # Core components
    "tokenize",
    "join_latex",
    "SymbolTable",
    "SymbolDefinition",
    "lookup",
    "char_to_latex",
    "Mode",
    "ModeRegistry",
    "TextMode",
    "MathMode",
    "default_registry",
    "get_property_runs",
    "serialize_atoms",
    "Parser",

    # Main converter
    "LaTeXConverter",
]


# Convenience function
def create_converter(**kwargs):
    """Create a configured LaTeX converter instance."""
    config = ConverterConfig(**kwargs)
    return LaTeXConverter(config)
