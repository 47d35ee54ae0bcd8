"""
Text mode: parsing of text spans and style-run serialization
"""

import logging
from typing import Callable, List, Optional, Sequence, Tuple

import regex

from ..atoms import Atom, GroupAtom, TextAtom
from ..boxes import Box
from ..definitions import get_symbol_table
from ..models import FONT_SIZE_COMMANDS, ParseError, ParserErrorCode, Style
from ..tokenizer import GROUP_CLOSE, GROUP_OPEN, MATH_SHIFTS, SPACE, join_latex
from .base_mode import ErrorSink, Mode, get_property_runs


logger = logging.getLogger(__name__)


FONT_FAMILY_COMMANDS = {
    'roman': '',
    'sans-serif': '\\textsf',
    'monospace': '\\texttt',
}

FONT_SERIES_COMMANDS = {
    'b': '\\textbf',
    'l': '\\textlf',
    'm': '\\textmd',
}

FONT_SHAPE_COMMANDS = {
    'it': '\\textit',
    'sl': '\\textsl',
    'sc': '\\textsc',
    'n': '\\textup',
}

TEXT_FONT_CLASS = {
    'roman': '',
    'sans-serif': 'ML__sans',
    'monospace': 'ML__tt',
}

FONT_SHAPE_CLASS = {
    'it': 'ML__it',
    'sl': 'ML__shape_sl',
    'sc': 'ML__shape_sc',
    'ol': 'ML__shape_ol',
}

FONT_WEIGHT_CLASS = {
    'ul': 'ML__series_ul',
    'el': 'ML__series_el',
    'l': 'ML__series_l',
    'sl': 'ML__series_sl',
    'm': '',
    'sb': 'ML__series_sb',
    'b': 'ML__bold',
    'eb': 'ML__series_eb',
    'ub': 'ML__series_ub',
}

FONT_WIDTH_CLASS = {
    'uc': 'ML__series_uc',
    'ec': 'ML__series_ec',
    'c': 'ML__series_c',
    'sc': 'ML__series_sc',
    'n': '',
    'sx': 'ML__series_sx',
    'x': 'ML__series_x',
    'ex': 'ML__series_ex',
    'ux': 'ML__series_ux',
}

_SERIES_PATTERN = regex.compile(r'(.?[lbm])?(.?[cx])?')

# A style command is either ('wrap', '\cmd{arg}') applied as prefix + {body},
# ('declare', '\cmd') emitted in front of the body, or None (pass through).
StyleCommand = Optional[Tuple[str, str]]


def _background_command(atom: Atom, run: Sequence[Atom]) -> StyleCommand:
    style = atom.style
    if not style.background_color:
        return None
    parent = atom.parent
    if parent is not None and parent.computed_style.background_color == style.background_color:
        return None
    if len(run) == 1 and atom.paints_background:
        return None
    color = style.verbatim_background_color or style.background_color
    return 'wrap', f"\\colorbox{{{color}}}"


def _color_command(atom: Atom, run: Sequence[Atom]) -> StyleCommand:
    style = atom.style
    if not style.color or style.color == 'none':
        return None
    parent = atom.parent
    if parent is not None and parent.computed_style.color == style.color:
        return None
    return 'wrap', f"\\textcolor{{{style.verbatim_color or style.color}}}"


def _font_family_command(atom: Atom, run: Sequence[Atom]) -> StyleCommand:
    family = atom.style.font_family
    if not family:
        return None
    if family in FONT_FAMILY_COMMANDS:
        command = FONT_FAMILY_COMMANDS[family]
        return ('wrap', command) if command else None
    return 'declare', f"\\fontfamily{{{family}}}"


def _font_size_command(atom: Atom, run: Sequence[Atom]) -> StyleCommand:
    size = atom.style.font_size
    if size is None:
        return None
    if not isinstance(size, int) or not 1 <= size < len(FONT_SIZE_COMMANDS):
        logger.debug(f"Dropping out-of-range font size {size!r}")
        return None
    return 'declare', '\\' + FONT_SIZE_COMMANDS[size]


def _font_series_command(atom: Atom, run: Sequence[Atom]) -> StyleCommand:
    series = atom.style.font_series
    if not series:
        return None
    if series in FONT_SERIES_COMMANDS:
        return 'wrap', FONT_SERIES_COMMANDS[series]
    return 'declare', f"\\fontseries{{{series}}}"


def _font_shape_command(atom: Atom, run: Sequence[Atom]) -> StyleCommand:
    shape = atom.style.font_shape
    if not shape:
        return None
    if shape in FONT_SHAPE_COMMANDS:
        return 'wrap', FONT_SHAPE_COMMANDS[shape]
    return 'declare', f"\\fontshape{{{shape}}}"


# Outermost first
STYLE_LEVELS: List[Tuple[str, Callable[[Atom, Sequence[Atom]], StyleCommand]]] = [
    ('background_color', _background_command),
    ('color', _color_command),
    ('font_family', _font_family_command),
    ('font_size', _font_size_command),
    ('font_series', _font_series_command),
    ('font_shape', _font_shape_command),
]


def emit_styled_run(run: Sequence[Atom], options, level: int = 0,
                    enclosed: bool = False, levels=STYLE_LEVELS) -> str:
    """Serialize ``run``, wrapping style runs from ``levels[level]`` in.

    ``enclosed`` tells whether the output ends at a closing brace, in which
    case a trailing declaration cannot leak into following content.
    """
    if level == len(levels):
        return join_latex(atom.serialize(options) for atom in run)

    prop, command_for = levels[level]
    runs = get_property_runs(run, prop)
    result = []
    for i, x in enumerate(runs):
        is_last = i == len(runs) - 1
        command = command_for(x[0], x)
        if command is None:
            result.append(emit_styled_run(x, options, level + 1, enclosed and is_last, levels))
            continue

        kind, text = command
        body = emit_styled_run(x, options, level + 1, True, levels)
        if kind == 'wrap':
            result.append(f"{text}{{{body}}}")
        else:
            declared = join_latex([text, body])
            result.append(declared if enclosed and is_last else f"{{{declared}}}")
    return join_latex(result)


def has_text_wrapper(atom: Atom) -> bool:
    """True when ``atom`` sets its own font series, shape or family.

    Such atoms are already delimited by a font command, so an outer
    \\text{...} is redundant. ``roman`` emits nothing and does not count.
    """
    style = atom.style
    if style.font_series or style.font_shape:
        return True
    return bool(style.font_family) and style.font_family != 'roman'


class TextMode(Mode):
    """Parser and serializer for text-mode spans."""

    def __init__(self):
        super().__init__('text')

    def create_atom(self, command: str, style: Style) -> Optional[Atom]:
        info = get_symbol_table().lookup(command, 'text')
        value = chr(info.codepoint) if info and info.codepoint is not None else command
        return TextAtom(command, value, style)

    def serialize(self, run: Sequence[Atom], options) -> str:
        run = list(run)
        prefix = ''
        start = 0
        while start < len(run) and isinstance(run[start], GroupAtom) and run[start].change_mode:
            prefix = join_latex([prefix, emit_styled_run(run[start:start + 1], options)])
            start += 1
        run = run[start:]

        wrap = (
            not options.skip_mode_command
            and bool(run)
            and not all(has_text_wrapper(atom) for atom in run)
        )
        suffix = emit_styled_run(run, options, enclosed=wrap) if run else ''
        if wrap and suffix:
            suffix = f"\\text{{{suffix}}}"
        return join_latex([prefix, suffix])

    def apply_style(self, box: Box, style: Style) -> Optional[str]:
        """Return the font-family name."""
        family = style.font_family
        if TEXT_FONT_CLASS.get(family):
            box.add_class(TEXT_FONT_CLASS[family])
        elif family and family not in TEXT_FONT_CLASS:
            # Not a well-known family. Use a style.
            box.set_style('font-family', family)

        if style.font_shape:
            box.add_class(FONT_SHAPE_CLASS.get(style.font_shape, ''))

        if style.font_series:
            m = _SERIES_PATTERN.match(style.font_series)
            if m:
                box.add_class(FONT_WEIGHT_CLASS.get(m.group(1) or '', ''))
                box.add_class(FONT_WIDTH_CLASS.get(m.group(2) or '', ''))

        # Always use the metrics of 'Main-Regular' in text mode
        return 'Main-Regular'

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
                result.append(TextAtom(' ', ' ', options.style))

            elif token.startswith('\\'):
                # The dispatcher parses the command and its arguments and
                # hands back what it did not consume
                logger.debug(f"Handing {token} to the dispatcher in text mode")
                atoms, tokens = options.parse('text', tokens[i - 1:], error)
                i = 0
                result.extend(atoms)

            elif token in MATH_SHIFTS:
                end = _find_closing_shift(tokens, token, i)
                if end is None:
                    error(ParseError(ParserErrorCode.UNTERMINATED_MATH_SHIFT, token))
                    end = len(tokens)
                logger.debug(f"Parsing tokens {i}..{end} as math")
                result.extend(options.parse_all('math', tokens[i:end], error))
                i = end + 1

            elif token in (GROUP_OPEN, GROUP_CLOSE):
                # Spurious braces are ignored by TeX in text mode. They only
                # separate adjacent commands, e.g. "\S{}a"
                pass

            else:
                info = symbols.lookup(token, 'text', options.macros)
                if info is None or (info.if_mode and 'text' not in info.if_mode):
                    error(ParseError(ParserErrorCode.UNEXPECTED_TOKEN, token))
                elif info.codepoint is not None:
                    result.append(TextAtom(
                        token,
                        chr(info.codepoint),
                        options.style,
                        verbatim_latex=symbols.char_to_latex('text', info.codepoint),
                    ))

        return result, tokens[i:]


def _find_closing_shift(tokens: Sequence[str], shift: str, start: int) -> Optional[int]:
    for index in range(start, len(tokens)):
        if tokens[index] == shift:
            return index
    return None
