import pytest
from math_atoms.atoms import Atom, TextAtom
from math_atoms.config import ConverterConfig, SerializeOptions
from math_atoms.converter import LaTeXConverter
from math_atoms.models import Style
from math_atoms.modes import TextMode
from math_atoms.parser import Parser


@pytest.fixture
def parser():
    """Dispatcher with the built-in modes and symbols."""
    return Parser()


@pytest.fixture
def parse_options(parser):
    """Parse options wired to the dispatcher."""
    return parser.make_options()


@pytest.fixture
def errors():
    """Error sink storage."""
    return []


@pytest.fixture
def text_mode():
    """Text mode instance."""
    return TextMode()


@pytest.fixture
def skip_options():
    """Serialize options that leave out the \\text{...} wrapper."""
    return SerializeOptions(skip_mode_command=True)


@pytest.fixture
def wrap_options():
    """Serialize options for text runs inside math."""
    return SerializeOptions()


@pytest.fixture
def converter():
    """Converter rooted in math mode."""
    return LaTeXConverter()


@pytest.fixture
def text_converter():
    """Converter rooted in text mode."""
    return LaTeXConverter(ConverterConfig(default_mode='text'))


@pytest.fixture
def make_text():
    """Factory for text atoms: make_text('a', color='red')."""
    def _make(value, **style):
        return TextAtom(value, value, Style(**style))
    return _make


@pytest.fixture
def make_mord():
    """Factory for math ordinary atoms."""
    def _make(value):
        return Atom('mord', command=value, value=value, mode='math', verbatim_latex=value)
    return _make


@pytest.fixture
def sample_text_sources():
    """Text-mode sources that should survive a round trip."""
    return [
        'Hello, world!',
        r'a \S b',
        r'\textbf{bold} and \textit{it}',
        r'\textcolor{red}{x}y',
        r'{\large big} small',
        r'\colorbox{yellow}{hi}',
        r'price: \$5',
        'a~b',
        r'area $x$ done',
        r'\textsf{\textbf{both}} plain',
        r'\fbox{boxed} text',
    ]


@pytest.fixture
def sample_math_sources():
    """Math-mode sources that should survive a round trip."""
    return [
        r'x+\alpha',
        r'\text{if }x',
        r'\textbf{ab}+c',
        r'a{b}',
        r'\bigl(x\bigr)',
        r'\Bigl{\langle}x\Bigr{\rangle}',
        r'\left(x\middle|y\right)',
    ]
