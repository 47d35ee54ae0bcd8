"""
Math mode: just enough of a math grammar to host text and delimiters
"""

import logging
from typing import List, Sequence, Tuple

from ..atoms import Atom, GroupAtom
from ..definitions import get_symbol_table
from ..models import ParseError, ParserErrorCode
from ..tokenizer import GROUP_CLOSE, GROUP_OPEN, MATH_SHIFTS, SPACE, find_group_end, join_latex
from .base_mode import ErrorSink, Mode, get_property_runs
from .text_mode import STYLE_LEVELS, _background_command, emit_styled_run


logger = logging.getLogger(__name__)

# Only colors survive in math; font changes belong to text runs
MATH_STYLE_LEVELS = [level for level in STYLE_LEVELS if level[0] == 'color']


class MathMode(Mode):
    """Parser and serializer for math-mode spans."""

    def __init__(self):
        super().__init__('math')

    def serialize(self, run: Sequence[Atom], options) -> str:
        result = []
        for x in get_property_runs(run, 'background_color'):
            body = emit_styled_run(x, options, levels=MATH_STYLE_LEVELS)
            if not body:
                continue
            command = _background_command(x[0], x)
            if command is not None:
                # \colorbox takes a text argument, the math goes inside it
                result.append(f"{command[1]}{{${body}$}}")
            elif options.skip_mode_command:
                result.append(body)
            else:
                result.append(f"${body}$")
        return join_latex(result)

    def parse(self, tokens: Sequence[str], error: ErrorSink,
              options) -> Tuple[List[Atom], List[str]]:
        symbols = options.symbols or get_symbol_table()
        tokens = list(tokens)
        result: List[Atom] = []
        i = 0

        while i < len(tokens):
            token = tokens[i]
            i += 1

            if token == SPACE:
                continue

            if token.startswith('\\'):
                atoms, tokens = options.parse('math', tokens[i - 1:], error)
                i = 0
                result.extend(atoms)

            elif token == GROUP_OPEN:
                end = find_group_end(tokens, i)
                if end is None:
                    error(ParseError(ParserErrorCode.UNBALANCED_BRACES, token))
                    end = len(tokens)
                group = GroupAtom(options.parse_all('math', tokens[i:end], error),
                                  mode='math', style=options.style)
                result.append(group)
                i = end + 1

            elif token == GROUP_CLOSE:
                error(ParseError(ParserErrorCode.UNBALANCED_BRACES, token))

            elif token in MATH_SHIFTS:
                logger.debug(f"Math shift {token} inside a math span")
                error(ParseError(ParserErrorCode.UNEXPECTED_TOKEN, token))

            else:
                info = symbols.lookup(token, 'math', options.macros)
                if info is None or (info.if_mode and 'math' not in info.if_mode):
                    error(ParseError(ParserErrorCode.UNEXPECTED_TOKEN, token))
                elif info.codepoint is not None:
                    result.append(Atom(
                        'mord',
                        command=token,
                        style=options.style,
                        value=chr(info.codepoint),
                        mode='math',
                        verbatim_latex=symbols.char_to_latex('math', info.codepoint),
                    ))

        return result, tokens[i:]
