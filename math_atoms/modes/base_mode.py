"""
Base class for parsing modes and the run partitioners they share
"""

from abc import ABC, abstractmethod
from typing import Callable, List, Optional, Sequence, Tuple, Any

from ..atoms import Atom
from ..boxes import Box
from ..models import Style, ParseError


ErrorSink = Callable[[ParseError], None]


def _partition(atoms: Sequence[Atom], key: Callable[[Atom], Any]) -> List[List[Atom]]:
    runs: List[List[Atom]] = []
    current_value = None
    for atom in atoms:
        value = key(atom)
        if runs and value == current_value:
            runs[-1].append(atom)
        else:
            runs.append([atom])
            current_value = value
    return runs


def get_property_runs(atoms: Sequence[Atom], prop: str) -> List[List[Atom]]:
    """Split ``atoms`` into maximal runs sharing the own value of ``prop``.

    An unset property (None) is a value of its own. The input is not
    modified and the concatenation of the runs is the input.
    """
    return _partition(atoms, lambda atom: getattr(atom.style, prop))


def get_mode_runs(atoms: Sequence[Atom]) -> List[List[Atom]]:
    """Split ``atoms`` into maximal runs of the same mode."""
    return _partition(atoms, lambda atom: atom.mode)


class Mode(ABC):
    """A parsing/serialization context with its own token grammar."""

    def __init__(self, name: str):
        self.name = name

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name!r})"

    @abstractmethod
    def parse(self, tokens: Sequence[str], error: ErrorSink,
              options) -> Tuple[List[Atom], List[str]]:
        """Turn tokens into atoms, returning the unconsumed tokens."""
        pass

    @abstractmethod
    def serialize(self, run: Sequence[Atom], options) -> str:
        """Turn a run of atoms of this mode back into LaTeX."""
        pass

    def create_atom(self, command: str, style: Style) -> Optional[Atom]:
        return None

    def apply_style(self, box: Box, style: Style) -> Optional[str]:
        """Apply ``style`` to ``box``; return the metrics font to use."""
        return None
