"""
Tokenizer and joiner for LaTeX source
"""

import string
from typing import Iterable, List, Optional, Sequence

import regex


SPACE = '<space>'
GROUP_OPEN = '<{>'
GROUP_CLOSE = '<}>'
INLINE_MATH = '<$>'
DISPLAY_MATH = '<$$>'

MATH_SHIFTS = (INLINE_MATH, DISPLAY_MATH)

_TOKEN_PATTERN = regex.compile(
    r'(?P<word>\\[a-zA-Z]+)'
    r'|(?P<symbol>\\.)'
    r'|(?P<display>\$\$)'
    r'|(?P<inline>\$)'
    r'|(?P<brace>[{}])'
    r'|(?P<space>\s+)'
    r'|(?P<comment>%[^\n]*\n?)'
    r'|(?P<char>.)',
    regex.DOTALL,
)

_CONTROL_WORD_END = regex.compile(r'\\[a-zA-Z]+\*?$')


def tokenize(latex: str) -> List[str]:
    """Split LaTeX source into tokens.

    Whitespace following a control word is dropped, as TeX does.
    """
    tokens = []
    after_control_word = False

    for match in _TOKEN_PATTERN.finditer(latex):
        kind = match.lastgroup
        text = match.group()

        if kind == 'space':
            if not after_control_word:
                tokens.append(SPACE)
        elif kind == 'comment':
            pass
        elif kind == 'brace':
            tokens.append(GROUP_OPEN if text == '{' else GROUP_CLOSE)
        elif kind == 'display':
            tokens.append(DISPLAY_MATH)
        elif kind == 'inline':
            tokens.append(INLINE_MATH)
        else:
            tokens.append(text)

        if kind != 'comment':
            after_control_word = kind == 'word'

    return tokens


def join_latex(segments: Iterable[str]) -> str:
    """Concatenate LaTeX fragments without merging adjacent tokens."""
    result = []
    after_control_word = False

    for segment in segments:
        if not segment:
            continue
        if after_control_word:
            if segment[0] in string.ascii_letters:
                result.append(' ')
            elif segment[0].isspace():
                result.append('{}')
        result.append(segment)
        after_control_word = _CONTROL_WORD_END.search(segment) is not None

    return ''.join(result)


def find_group_end(tokens: Sequence[str], start: int) -> Optional[int]:
    """Index of the first unbalanced closing brace at or after ``start``."""
    depth = 0
    for index in range(start, len(tokens)):
        token = tokens[index]
        if token == GROUP_OPEN:
            depth += 1
        elif token == GROUP_CLOSE:
            if depth == 0:
                return index
            depth -= 1
    return None
