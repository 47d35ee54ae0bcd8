"""
Symbol table: which tokens denote which glyph in which mode
"""

import json
import logging
import string
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional, Tuple, Union

import yaml


logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SymbolDefinition:
    codepoint: Optional[int] = None
    # Modes the definition is restricted to, when not the requested one
    if_mode: Optional[Tuple[str, ...]] = None
    # Replacement source of a multi-character user macro
    expansion: Optional[str] = None


# Symbols valid in math and text mode alike
COMMON_SYMBOLS = {
    '\\$': '$', '\\%': '%', '\\&': '&', '\\#': '#', '\\_': '_',
    '\\{': '{', '\\}': '}',
    '\\S': '§', '\\P': '¶', '\\dag': '†', '\\ddag': '‡',
    '\\copyright': '©', '\\pounds': '£', '\\ldots': '…',
}

TEXT_SYMBOLS = {
    '~': ' ',
    '\\textbackslash': '\\',
    '\\textasciitilde': '~',
    '\\textasciicircum': '^',
    '\\textcopyright': '©',
    '\\textregistered': '®',
    '\\texttrademark': '™',
    '\\textbullet': '•',
    '\\textellipsis': '…',
    '\\textendash': '–',
    '\\textemdash': '—',
    '\\textquoteleft': '‘',
    '\\textquoteright': '’',
    '\\textquotedblleft': '“',
    '\\textquotedblright': '”',
    '\\textdegree': '°',
    '\\euro': '€',
    '\\ss': 'ß',
    '\\o': 'ø',
    '\\O': 'Ø',
    '\\ae': 'æ',
    '\\AE': 'Æ',
    '\\textless': '<',
    '\\textgreater': '>',
    '\\textbar': '|',
}

MATH_SYMBOLS = {
    '\\alpha': 'α', '\\beta': 'β', '\\gamma': 'γ',
    '\\delta': 'δ', '\\epsilon': 'ϵ', '\\varepsilon': 'ε',
    '\\zeta': 'ζ', '\\eta': 'η', '\\theta': 'θ',
    '\\iota': 'ι', '\\kappa': 'κ', '\\lambda': 'λ',
    '\\mu': 'μ', '\\nu': 'ν', '\\xi': 'ξ', '\\pi': 'π',
    '\\rho': 'ρ', '\\sigma': 'σ', '\\tau': 'τ',
    '\\upsilon': 'υ', '\\phi': 'ϕ', '\\varphi': 'φ',
    '\\chi': 'χ', '\\psi': 'ψ', '\\omega': 'ω',
    '\\Gamma': 'Γ', '\\Delta': 'Δ', '\\Theta': 'Θ',
    '\\Lambda': 'Λ', '\\Xi': 'Ξ', '\\Pi': 'Π',
    '\\Sigma': 'Σ', '\\Upsilon': 'Υ', '\\Phi': 'Φ',
    '\\Psi': 'Ψ', '\\Omega': 'Ω',
    '\\infty': '∞', '\\pm': '±', '\\mp': '∓',
    '\\times': '×', '\\div': '÷', '\\cdot': '⋅',
    '\\leq': '≤', '\\geq': '≥', '\\neq': '≠',
    '\\approx': '≈', '\\equiv': '≡', '\\in': '∈',
    '\\to': '→', '\\partial': '∂', '\\nabla': '∇',
    '\\sum': '∑', '\\prod': '∏', '\\int': '∫',
    '\\langle': '⟨', '\\rangle': '⟩',
    '\\lfloor': '⌊', '\\rfloor': '⌋',
    '\\lceil': '⌈', '\\rceil': '⌉',
    '\\vert': '|', '\\Vert': '∥', '\\|': '∥',
    '\\lbrace': '{', '\\rbrace': '}',
    '\\uparrow': '↑', '\\downarrow': '↓',
}

_TEXT_PUNCTUATION = '!"\'()*+,-./:;<=>?@[]`|'
_MATH_PUNCTUATION = '+-=<>()[]|/*,.;:!?\''


def _default_mappings() -> Dict[str, Dict[str, int]]:
    letters = string.ascii_letters + string.digits
    text = {c: ord(c) for c in letters + _TEXT_PUNCTUATION}
    math = {c: ord(c) for c in letters + _MATH_PUNCTUATION}
    for table, symbols in ((text, COMMON_SYMBOLS), (text, TEXT_SYMBOLS),
                           (math, COMMON_SYMBOLS), (math, MATH_SYMBOLS)):
        table.update({token: ord(char) for token, char in symbols.items()})
    return {'math': math, 'text': text}


def _to_codepoint(value: Union[int, str]) -> int:
    if isinstance(value, int):
        return value
    if len(value) == 1:
        return ord(value)
    if value.upper().startswith('U+'):
        return int(value[2:], 16)
    raise ValueError(f"Not a codepoint: {value!r}")


class SymbolTable:
    """Per-mode token -> codepoint mappings, with optional file overrides."""

    def __init__(self, config_path: Optional[Path] = None):
        self.mappings = _default_mappings()
        if config_path:
            self._load_from_file(Path(config_path))
        self._reverse: Dict[str, Dict[int, str]] = {}

    def _load_from_file(self, path: Path):
        """Load extra mappings from a YAML/JSON file."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                if path.suffix in ['.yaml', '.yml']:
                    data = yaml.safe_load(f)
                else:
                    data = json.load(f)

            for mode, symbols in (data or {}).items():
                table = self.mappings.setdefault(mode, {})
                for token, value in symbols.items():
                    table[token] = _to_codepoint(value)

            logger.info(f"Loaded symbol mappings from {path}")

        except (OSError, ValueError, TypeError, AttributeError, yaml.YAMLError) as e:
            logger.warning(f"Failed to load symbol mappings from {path}: {e}")

    def add_symbol(self, mode: str, token: str, value: Union[int, str]):
        self.mappings.setdefault(mode, {})[token] = _to_codepoint(value)
        self._reverse.pop(mode, None)

    def lookup(self, token: str, mode: str,
               macros: Optional[Dict[str, str]] = None) -> Optional[SymbolDefinition]:
        """Find the definition of ``token`` in ``mode``.

        User macros are consulted first. A token only defined in other
        modes comes back with ``if_mode`` naming those modes.
        """
        if macros and token.startswith('\\') and token[1:] in macros:
            body = macros[token[1:]]
            if len(body) == 1:
                return SymbolDefinition(codepoint=ord(body))
            return SymbolDefinition(expansion=body)

        table = self.mappings.get(mode, {})
        if token in table:
            return SymbolDefinition(codepoint=table[token])

        other_modes = tuple(
            other for other, symbols in self.mappings.items()
            if other != mode and token in symbols
        )
        if other_modes:
            return SymbolDefinition(
                codepoint=self.mappings[other_modes[0]][token],
                if_mode=other_modes,
            )

        if len(token) == 1 and ord(token) > 127 and token.isprintable():
            return SymbolDefinition(codepoint=ord(token))

        return None

    def char_to_latex(self, mode: str, codepoint: int) -> str:
        """Source text that reproduces ``codepoint`` in ``mode``."""
        if mode not in self._reverse:
            reverse: Dict[int, str] = {}
            for token, cp in self.mappings.get(mode, {}).items():
                # One-character tokens win over control words
                if len(token) == 1 or cp not in reverse:
                    reverse[cp] = token
            self._reverse[mode] = reverse
        return self._reverse[mode].get(codepoint, chr(codepoint))


_symbol_table_instance = None
_symbol_table_lock = threading.Lock()


def get_symbol_table() -> SymbolTable:
    global _symbol_table_instance
    if _symbol_table_instance is None:
        with _symbol_table_lock:
            if _symbol_table_instance is None:
                _symbol_table_instance = SymbolTable()
    return _symbol_table_instance


def lookup(token: str, mode: str,
           macros: Optional[Dict[str, str]] = None) -> Optional[SymbolDefinition]:
    return get_symbol_table().lookup(token, mode, macros)


def char_to_latex(mode: str, codepoint: int) -> str:
    return get_symbol_table().char_to_latex(mode, codepoint)
