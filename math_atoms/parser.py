"""
Mode-aware dispatcher: parses commands and hands spans to the mode parsers
"""

import logging
from dataclasses import replace
from typing import Dict, List, Optional, Sequence, Tuple

from .atoms import Atom, BoxAtom, GroupAtom, TextAtom
from .config import ParseOptions
from .definitions import SymbolTable, get_symbol_table
from .delimiters import SIZED_DELIMITER_COMMANDS, DelimAtom, SizedDelimAtom
from .models import ParseError, ParserErrorCode
from .modes import ModeRegistry, default_registry
from .modes.base_mode import ErrorSink
from .tokenizer import GROUP_CLOSE, GROUP_OPEN, SPACE, find_group_end, tokenize


logger = logging.getLogger(__name__)


# Commands taking one argument, parsed in text mode with extra style
TEXT_STYLE_COMMANDS: Dict[str, Dict[str, str]] = {
    '\\text': {},
    '\\textnormal': {},
    '\\mbox': {},
    '\\textbf': {'font_series': 'b'},
    '\\textmd': {'font_series': 'm'},
    '\\textlf': {'font_series': 'l'},
    '\\textit': {'font_shape': 'it'},
    '\\emph': {'font_shape': 'it'},
    '\\textsl': {'font_shape': 'sl'},
    '\\textsc': {'font_shape': 'sc'},
    '\\textup': {'font_shape': 'n'},
    '\\textrm': {'font_family': 'roman'},
    '\\textsf': {'font_family': 'sans-serif'},
    '\\texttt': {'font_family': 'monospace'},
}

# Declarations: apply to the rest of the enclosing group
FONT_SIZE_DECLARATIONS = {
    '\\tiny': 1,
    '\\scriptsize': 2,
    '\\footnotesize': 3,
    '\\small': 4,
    '\\normalsize': 5,
    '\\large': 6,
    '\\Large': 7,
    '\\LARGE': 8,
    '\\huge': 9,
    '\\Huge': 10,
}

STYLE_DECLARATIONS: Dict[str, Dict[str, str]] = {
    '\\bfseries': {'font_series': 'b'},
    '\\mdseries': {'font_series': 'm'},
    '\\itshape': {'font_shape': 'it'},
    '\\slshape': {'font_shape': 'sl'},
    '\\scshape': {'font_shape': 'sc'},
    '\\upshape': {'font_shape': 'n'},
    '\\rmfamily': {'font_family': 'roman'},
    '\\sffamily': {'font_family': 'sans-serif'},
    '\\ttfamily': {'font_family': 'monospace'},
}

# Declarations taking the property value as an argument
ARGUMENT_DECLARATIONS = {
    '\\fontseries': 'font_series',
    '\\fontshape': 'font_shape',
    '\\fontfamily': 'font_family',
    '\\color': 'color',
}

LEFT_RIGHT_COMMANDS = {'\\left', '\\middle', '\\right'}

DELIMITER_TOKENS = {
    '(', ')', '[', ']', '|', '/', '.', '<', '>',
    '\\{', '\\}', '\\lbrace', '\\rbrace', '\\langle', '\\rangle',
    '\\lfloor', '\\rfloor', '\\lceil', '\\rceil', '\\vert', '\\Vert',
    '\\|', '\\lvert', '\\rvert', '\\lVert', '\\rVert', '\\backslash',
    '\\uparrow', '\\downarrow', '\\updownarrow',
    '\\Uparrow', '\\Downarrow', '\\Updownarrow',
}

NO_OP_COMMANDS = {'\\selectfont', '\\relax'}


def tokens_to_string(tokens: Sequence[str]) -> str:
    """Flatten a string argument such as a color name."""
    text = {SPACE: ' ', GROUP_OPEN: '{', GROUP_CLOSE: '}'}
    return ''.join(text.get(token, token) for token in tokens).strip()


class Parser:
    """Dispatches token spans to modes and parses commands and their arguments."""

    def __init__(self, registry: Optional[ModeRegistry] = None,
                 symbols: Optional[SymbolTable] = None):
        self.registry = registry or default_registry()
        self.symbols = symbols or get_symbol_table()

    def make_options(self, **kwargs) -> ParseOptions:
        kwargs.setdefault('symbols', self.symbols)
        return ParseOptions(dispatcher=self, **kwargs)

    def parse(self, mode: str, tokens: Sequence[str], error: ErrorSink,
              options: ParseOptions) -> Tuple[List[Atom], List[str]]:
        """Parse ``tokens`` in ``mode``.

        A leading command is parsed with its arguments and the rest is
        handed back unconsumed; otherwise the mode parser takes the span.
        """
        tokens = list(tokens)
        if not tokens:
            return [], []
        if tokens[0].startswith('\\'):
            return self.parse_command(mode, tokens, error, options)
        return self.registry.get(mode).parse(tokens, error, options)

    def parse_all(self, mode: str, tokens: Sequence[str], error: ErrorSink,
                  options: ParseOptions) -> List[Atom]:
        """Parse the whole span in ``mode``."""
        atoms: List[Atom] = []
        tokens = list(tokens)
        while tokens:
            parsed, rest = self.parse(mode, tokens, error, options)
            atoms.extend(parsed)
            if len(rest) >= len(tokens):
                # No progress: drop the offending token
                error(ParseError(ParserErrorCode.UNEXPECTED_TOKEN, tokens[0]))
                rest = rest[1:]
            tokens = rest
        return atoms

    # Commands --------------------------------------------------------------

    def parse_command(self, mode: str, tokens: List[str], error: ErrorSink,
                      options: ParseOptions) -> Tuple[List[Atom], List[str]]:
        command = tokens[0]
        logger.debug(f"Parsing {command} in {mode} mode")

        if options.macros and command[1:] in options.macros:
            return self._expand_macro(mode, tokens, error, options)

        if command in TEXT_STYLE_COMMANDS:
            arg, rest = self._read_argument(tokens, 1, error, command)
            if arg is None:
                return [], rest
            styled = options.with_style(**TEXT_STYLE_COMMANDS[command])
            return self.parse_all('text', arg, error, styled), rest

        if command in FONT_SIZE_DECLARATIONS:
            return self._parse_declaration(
                mode, tokens, 1, error, options.with_style(font_size=FONT_SIZE_DECLARATIONS[command]))

        if command in STYLE_DECLARATIONS:
            return self._parse_declaration(
                mode, tokens, 1, error, options.with_style(**STYLE_DECLARATIONS[command]))

        if command in ARGUMENT_DECLARATIONS:
            arg, index = self._read_argument_index(tokens, 1, error, command)
            if arg is None:
                return [], tokens[index:]
            value = tokens_to_string(arg)
            prop = ARGUMENT_DECLARATIONS[command]
            changes = {prop: value}
            if prop == 'color':
                changes['verbatim_color'] = value
            return self._parse_declaration(mode, tokens, index, error, options.with_style(**changes))

        if command == '\\textcolor':
            color, index = self._read_argument_index(tokens, 1, error, command)
            if color is None:
                return [], tokens[index:]
            body, rest = self._read_argument(tokens, index, error, command)
            if body is None:
                return [], rest
            value = tokens_to_string(color)
            styled = options.with_style(color=value, verbatim_color=value)
            return self.parse_all(mode, body, error, styled), rest

        if command == '\\colorbox':
            color, index = self._read_argument_index(tokens, 1, error, command)
            if color is None:
                return [], tokens[index:]
            body, rest = self._read_argument(tokens, index, error, command)
            if body is None:
                return [], rest
            value = tokens_to_string(color)
            styled = options.with_style(background_color=value, verbatim_background_color=value)
            return self.parse_all('text', body, error, styled), rest

        if command in ('\\fbox', '\\fcolorbox'):
            return self._parse_box(mode, tokens, error, options)

        if command == '\\ensuremath':
            arg, rest = self._read_argument(tokens, 1, error, command)
            if arg is None:
                return [], rest
            atoms = self.parse_all('math', arg, error, options)
            if mode == 'math':
                return atoms, rest
            group = GroupAtom(atoms, mode=mode, command=command, change_mode=True,
                              body_mode='math', style=options.style)
            return [group], rest

        if command in SIZED_DELIMITER_COMMANDS or command in LEFT_RIGHT_COMMANDS:
            return self._parse_delimiter(mode, tokens, error, options)

        if command in NO_OP_COMMANDS:
            return [], tokens[1:]

        return self._parse_symbol(mode, tokens, error, options)

    def _parse_symbol(self, mode, tokens, error, options):
        command = tokens[0]
        info = self.symbols.lookup(command, mode)
        if info is None or (info.if_mode and mode not in info.if_mode) or info.codepoint is None:
            error(ParseError(ParserErrorCode.UNEXPECTED_TOKEN, command))
            return [], tokens[1:]

        verbatim = self.symbols.char_to_latex(mode, info.codepoint)
        if mode == 'text':
            atom = TextAtom(command, chr(info.codepoint), options.style, verbatim_latex=verbatim)
        else:
            atom = Atom('mord', command=command, style=options.style,
                        value=chr(info.codepoint), mode=mode, verbatim_latex=verbatim)
        return [atom], tokens[1:]

    def _expand_macro(self, mode, tokens, error, options):
        command = tokens[0]
        info = self.symbols.lookup(command, mode, options.macros)
        if info.codepoint is not None:
            char = chr(info.codepoint)
            if mode == 'text':
                return [TextAtom(command, char, options.style, verbatim_latex=command)], tokens[1:]
            return [Atom('mord', command=command, style=options.style, value=char,
                         mode=mode, verbatim_latex=command)], tokens[1:]

        # A macro cannot expand to itself
        macros = {k: v for k, v in options.macros.items() if k != command[1:]}
        logger.debug(f"Expanding {command} -> {info.expansion!r}")
        atoms = self.parse_all(mode, tokenize(info.expansion), error, replace(options, macros=macros))
        return atoms, tokens[1:]

    def _parse_declaration(self, mode, tokens, start, error, options):
        end = find_group_end(tokens, start)
        if end is None:
            end = len(tokens)
        return self.parse_all(mode, tokens[start:end], error, options), tokens[end:]

    def _parse_box(self, mode, tokens, error, options):
        command = tokens[0]
        index = 1
        frame_color = background = None
        if command == '\\fcolorbox':
            frame, index = self._read_argument_index(tokens, index, error, command)
            if frame is None:
                return [], tokens[index:]
            fill, index = self._read_argument_index(tokens, index, error, command)
            if fill is None:
                return [], tokens[index:]
            frame_color, background = tokens_to_string(frame), tokens_to_string(fill)

        body, rest = self._read_argument(tokens, index, error, command)
        if body is None:
            return [], rest
        children = self.parse_all('text', body, error, options)
        box = BoxAtom(children, mode=mode, command=command, frame_color=frame_color,
                      background=background, style=options.style)
        return [box], rest

    def _parse_delimiter(self, mode, tokens, error, options):
        command = tokens[0]
        arg, index = self._read_argument_index(tokens, 1, error, command)
        if arg is None:
            return [], tokens[index:]

        delim = tokens_to_string(arg)
        if delim not in DELIMITER_TOKENS:
            error(ParseError(ParserErrorCode.UNEXPECTED_TOKEN, delim))
            return [], tokens[index:]

        if command in SIZED_DELIMITER_COMMANDS:
            size, delim_class = SIZED_DELIMITER_COMMANDS[command]
            atom = SizedDelimAtom(command, delim, delim_class=delim_class, size=size,
                                  style=options.style, mode=mode)
        else:
            atom = DelimAtom(command, delim, style=options.style, mode=mode)
        return [atom], tokens[index:]

    # Arguments -------------------------------------------------------------

    def _read_argument_index(self, tokens: List[str], start: int, error: ErrorSink,
                             command: str) -> Tuple[Optional[List[str]], int]:
        """Read a brace group or single token at ``start``.

        Returns the argument tokens (None when missing) and the index
        following the argument.
        """
        index = start
        while index < len(tokens) and tokens[index] == SPACE:
            index += 1

        if index >= len(tokens) or tokens[index] == GROUP_CLOSE:
            error(ParseError(ParserErrorCode.MISSING_ARGUMENT, command))
            return None, index

        if tokens[index] == GROUP_OPEN:
            end = find_group_end(tokens, index + 1)
            if end is None:
                error(ParseError(ParserErrorCode.UNBALANCED_BRACES, command))
                return tokens[index + 1:], len(tokens)
            return tokens[index + 1:end], end + 1

        return [tokens[index]], index + 1

    def _read_argument(self, tokens, start, error, command):
        arg, index = self._read_argument_index(tokens, start, error, command)
        return arg, tokens[index:]
