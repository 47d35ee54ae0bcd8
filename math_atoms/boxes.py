"""
Visual box handle and render context used by atom rendering
"""

from dataclasses import dataclass, field
from typing import Optional, Dict, List
from abc import ABC, abstractmethod


@dataclass
class Box:
    """Handle on a visual box produced by the layout engine."""
    value: Optional[str] = None
    classes: str = ""
    styles: Dict[str, str] = field(default_factory=dict)
    delim: Optional[str] = None
    caret: Optional[str] = None
    children: List['Box'] = field(default_factory=list)

    def set_style(self, prop: str, value: str):
        """Set an inline presentation declaration."""
        self.styles[prop] = value

    def add_class(self, name: str):
        if name:
            self.classes = f"{self.classes} {name}".strip()

    @property
    def class_list(self) -> List[str]:
        return self.classes.split()


class RenderContext(ABC):
    """Layout services the atoms rely on but do not implement."""

    @abstractmethod
    def make_sized_delim(self, delim: str, size: int,
                         classes: Optional[str] = None) -> Optional[Box]:
        """Return a glyph box for ``delim`` at size class 1..4, or None."""
        pass

    def bind(self, atom, box: Box) -> Box:
        """Associate a box with the atom that produced it."""
        return box
