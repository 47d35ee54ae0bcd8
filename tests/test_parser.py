import pytest
from math_atoms.atoms import Atom, TextAtom, GroupAtom, BoxAtom
from math_atoms.config import ParseOptions
from math_atoms.delimiters import DelimAtom, SizedDelimAtom
from math_atoms.models import ParserErrorCode
from math_atoms.tokenizer import tokenize


def parse(parser, mode, latex, errors, options=None):
    options = options or parser.make_options()
    return parser.parse_all(mode, tokenize(latex), errors.append, options)


class TestTextCommands:

    def test_style_command(self, parser, errors):
        """Test that \\textbf styles its argument."""
        atoms = parse(parser, 'text', r'\textbf{ab}c', errors)
        assert [(a.value, a.style.font_series) for a in atoms] == [('a', 'b'), ('b', 'b'), ('c', None)]
        assert errors == []

    def test_text_in_math(self, parser, errors):
        """Test that \\text switches to text mode."""
        atoms = parse(parser, 'math', r'x\text{ if }', errors)
        assert [a.mode for a in atoms] == ['math', 'text', 'text', 'text', 'text']

    def test_textcolor(self, parser, errors):
        """Test that \\textcolor keeps the color spelling."""
        atoms = parse(parser, 'text', r'\textcolor{red}{x}y', errors)
        assert atoms[0].style.color == 'red'
        assert atoms[0].style.verbatim_color == 'red'
        assert atoms[1].style.color is None

    def test_colorbox(self, parser, errors):
        """Test that \\colorbox sets a background in text mode."""
        atoms = parse(parser, 'math', r'\colorbox{yellow}{hi}', errors)
        assert [a.mode for a in atoms] == ['text', 'text']
        assert all(a.style.background_color == 'yellow' for a in atoms)

    def test_fbox(self, parser, errors):
        """Test framed boxes."""
        atoms = parse(parser, 'text', r'\fcolorbox{red}{blue}{x}', errors)
        assert len(atoms) == 1
        box = atoms[0]
        assert isinstance(box, BoxAtom)
        assert (box.frame_color, box.background) == ('red', 'blue')
        assert [c.value for c in box.children] == ['x']

    def test_ensuremath_in_text(self, parser, errors):
        """Test that \\ensuremath in text becomes a mode-switching group."""
        atoms = parse(parser, 'text', r'\ensuremath{x}', errors)
        assert len(atoms) == 1
        group = atoms[0]
        assert isinstance(group, GroupAtom)
        assert group.change_mode
        assert group.body_mode == 'math'
        assert group.children[0].mode == 'math'

    def test_ensuremath_in_math(self, parser, errors):
        """Test that \\ensuremath in math adds no group."""
        atoms = parse(parser, 'math', r'\ensuremath{x}', errors)
        assert [type(a) for a in atoms] == [Atom]


class TestDeclarations:

    def test_size_declaration_scoped_to_group(self, parser, errors):
        """Test that a declaration ends with its group."""
        atoms = parse(parser, 'text', r'{\large ab} c', errors)
        assert [a.style.font_size for a in atoms] == [6, 6, None, None]

    def test_style_declaration(self, parser, errors):
        """Test \\bfseries and friends."""
        atoms = parse(parser, 'text', r'\itshape ab', errors)
        assert all(a.style.font_shape == 'it' for a in atoms)

    def test_argument_declaration(self, parser, errors):
        """Test \\fontseries with \\selectfont."""
        atoms = parse(parser, 'text', r'\fontseries{sb}\selectfont x', errors)
        assert [(a.value, a.style.font_series) for a in atoms] == [('x', 'sb')]
        assert errors == []

    def test_color_declaration(self, parser, errors):
        """Test \\color."""
        atoms = parse(parser, 'text', r'{\color{red}ab}c', errors)
        assert [a.style.color for a in atoms] == ['red', 'red', None]


class TestMacros:

    def test_single_character_macro(self, parser, errors):
        """Test a macro standing for one character."""
        options = parser.make_options(macros={'R': 'ℝ'})
        atoms = parse(parser, 'math', r'\R', errors, options)
        assert atoms[0].value == 'ℝ'
        assert atoms[0].serialize(None) == '\\R'

    def test_expansion(self, parser, errors):
        """Test a macro expanding to source."""
        options = parser.make_options(macros={'hi': 'hello'})
        atoms = parse(parser, 'text', r'\hi', errors, options)
        assert ''.join(a.value for a in atoms) == 'hello'

    def test_recursive_macro(self, parser, errors):
        """Test that a macro cannot expand itself forever."""
        options = parser.make_options(macros={'loop': r'\loop x'})
        atoms = parse(parser, 'text', r'\loop', errors, options)
        assert [a.value for a in atoms] == ['x']
        assert [e.code for e in errors] == [ParserErrorCode.UNEXPECTED_TOKEN]


class TestMath:

    def test_symbols(self, parser, errors):
        """Test math symbols."""
        atoms = parse(parser, 'math', r'x + \alpha', errors)
        assert [a.value for a in atoms] == ['x', '+', 'α']
        assert atoms[2].serialize(None) == '\\alpha'

    def test_group(self, parser, errors):
        """Test brace groups in math."""
        atoms = parse(parser, 'math', 'a{b}', errors)
        assert isinstance(atoms[1], GroupAtom)
        assert atoms[1].children[0].value == 'b'

    def test_stray_closing_brace(self, parser, errors):
        """Test an unmatched closing brace."""
        atoms = parse(parser, 'math', 'a}b', errors)
        assert [a.value for a in atoms] == ['a', 'b']
        assert [e.code for e in errors] == [ParserErrorCode.UNBALANCED_BRACES]

    def test_text_only_symbol(self, parser, errors):
        """Test that a text symbol is rejected in math."""
        parse(parser, 'math', r'\textbackslash', errors)
        assert errors[0].code == ParserErrorCode.UNEXPECTED_TOKEN


class TestDelimiters:

    def test_sized(self, parser, errors):
        """Test sizing commands."""
        atoms = parse(parser, 'math', r'\bigl(x\Bigr\rangle', errors)
        left, _, right = atoms
        assert isinstance(left, SizedDelimAtom)
        assert (left.size, left.delim_class, left.value) == (1, 'mopen', '(')
        assert (right.size, right.delim_class, right.value) == (2, 'mclose', '\\rangle')

    def test_braced_delimiter(self, parser, errors):
        """Test a delimiter given as a group."""
        atoms = parse(parser, 'math', r'\Biggm{|}', errors)
        assert (atoms[0].size, atoms[0].delim_class, atoms[0].value) == (4, 'mrel', '|')

    def test_left_right(self, parser, errors):
        """Test \\left, \\middle and \\right."""
        atoms = parse(parser, 'math', r'\left(x\middle|y\right.', errors)
        delims = [a for a in atoms if isinstance(a, DelimAtom)]
        assert [(d.command, d.value) for d in delims] == [
            ('\\left', '('), ('\\middle', '|'), ('\\right', '.')
        ]

    def test_not_a_delimiter(self, parser, errors):
        """Test a sizing command applied to a letter."""
        atoms = parse(parser, 'math', r'\bigl x', errors)
        assert atoms == []
        assert errors[0].code == ParserErrorCode.UNEXPECTED_TOKEN


class TestErrors:

    def test_missing_argument(self, parser, errors):
        """Test a command at the end of input."""
        atoms = parse(parser, 'text', r'a\textbf', errors)
        assert [a.value for a in atoms] == ['a']
        assert [e.code for e in errors] == [ParserErrorCode.MISSING_ARGUMENT]
        assert errors[0].arg == '\\textbf'

    def test_unterminated_argument(self, parser, errors):
        """Test an argument group without its closing brace."""
        atoms = parse(parser, 'text', r'\textbf{ab', errors)
        assert [a.style.font_series for a in atoms] == ['b', 'b']
        assert [e.code for e in errors] == [ParserErrorCode.UNBALANCED_BRACES]

    def test_unknown_mode(self, parser, errors):
        """Test that an unregistered mode is rejected."""
        with pytest.raises(KeyError):
            parse(parser, 'chem', 'a', errors)

    def test_options_without_dispatcher(self, errors):
        """Test that mode parsers need a dispatcher to call back into."""
        with pytest.raises(RuntimeError):
            ParseOptions().parse('text', ['\\S'], errors.append)

    def test_empty_input(self, parser, errors):
        """Test with no tokens."""
        assert parse(parser, 'text', '', errors) == []
        assert parser.parse('text', [], errors.append, parser.make_options()) == ([], [])
