"""
Main converter between LaTeX source and atom trees
"""

import logging
from typing import Optional, Sequence

from .atoms import Atom
from .config import ConverterConfig, SerializeOptions
from .definitions import SymbolTable, get_symbol_table
from .models import LaTeXParseError, ParseResult
from .modes import default_registry, serialize_atoms
from .parser import Parser
from .tokenizer import tokenize


logger = logging.getLogger(__name__)


class LaTeXConverter:
    """Parses LaTeX into atoms and serializes atoms back into LaTeX."""

    def __init__(self, config: Optional[ConverterConfig] = None):
        """Initialize converter with configuration."""
        self.config = config or ConverterConfig()

        if self.config.symbol_table_path:
            self.symbols = SymbolTable(self.config.symbol_table_path)
        else:
            self.symbols = get_symbol_table()
        self.registry = default_registry()
        self.parser = Parser(self.registry, self.symbols)

        # Setup logging
        if self.config.verbose:
            logging.basicConfig(level=logging.INFO)
        if self.config.debug:
            logging.basicConfig(level=logging.DEBUG)

    def parse_latex(self, latex: str, mode: Optional[str] = None) -> ParseResult:
        """Parse LaTeX source.

        Args:
            latex: LaTeX source to parse
            mode: "math" or "text"; defaults to the configured mode

        Returns:
            ParseResult with the atoms and every error reported on the way

        Raises:
            LaTeXParseError: in strict mode, when any error was reported
        """
        mode = mode or self.config.default_mode
        errors = []
        options = self.parser.make_options(macros=dict(self.config.macros))

        atoms = self.parser.parse_all(mode, tokenize(latex), errors.append, options)

        if errors:
            logger.info(f"{len(errors)} error(s) while parsing {latex!r}")
            if self.config.strict:
                raise LaTeXParseError(errors)

        return ParseResult(atoms=atoms, errors=errors, mode=mode)

    def to_latex(self, atoms: Sequence[Atom], mode: Optional[str] = None,
                 skip_mode_command: bool = False) -> str:
        """Serialize atoms whose enclosing context is ``mode``."""
        options = SerializeOptions(
            skip_mode_command=skip_mode_command,
            default_mode=mode or self.config.default_mode,
            registry=self.registry,
        )
        return serialize_atoms(atoms, options)

    def round_trip(self, latex: str, mode: Optional[str] = None) -> str:
        """Parse then serialize, giving the minimal equivalent source."""
        result = self.parse_latex(latex, mode)
        return self.to_latex(result.atoms, result.mode)
