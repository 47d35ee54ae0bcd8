"""
Atom tree: the typed nodes produced by parsing and consumed by serialization
"""

import weakref
import logging
from dataclasses import replace
from typing import Dict, List, Optional, Any, Iterable, Type

from .models import Style
from .boxes import Box
from .config import SerializeOptions
from .definitions import char_to_latex


logger = logging.getLogger(__name__)


class Atom:
    """A node of the parsed tree.

    Children are owned by their parent. The parent link is a weak
    reference, only used to read the enclosing computed style.
    """

    kind = 'atom'

    # Atoms that paint their own background are never wrapped in \colorbox
    paints_background = False

    def __init__(self, kind: Optional[str] = None, command: str = '',
                 style: Optional[Style] = None, value: Optional[str] = None,
                 mode: str = 'math', verbatim_latex: Optional[str] = None):
        if kind:
            self.kind = kind
        self.command = command
        self.style = style or Style()
        self.value = value
        self.mode = mode
        self.verbatim_latex = verbatim_latex
        self.caret: Optional[str] = None
        self._parent: Optional[weakref.ref] = None
        self._children: List['Atom'] = []

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.command!r}, {self.value!r})"

    # Tree ------------------------------------------------------------------

    @property
    def parent(self) -> Optional['Atom']:
        return self._parent() if self._parent is not None else None

    @property
    def children(self) -> List['Atom']:
        return list(self._children)

    def append_child(self, child: 'Atom') -> 'Atom':
        """Append ``child``, detaching it from its previous parent first."""
        return self.insert_child(len(self._children), child)

    def insert_child(self, index: int, child: 'Atom') -> 'Atom':
        if child is self:
            raise ValueError("An atom cannot be its own child")
        previous = child.parent
        if previous is not None:
            previous.remove_child(child)
        self._children.insert(index, child)
        child._parent = weakref.ref(self)
        return child

    def remove_child(self, child: 'Atom') -> 'Atom':
        self._children.remove(child)
        child._parent = None
        return child

    def set_children(self, children: Iterable['Atom']):
        for child in list(self._children):
            self.remove_child(child)
        for child in children:
            self.append_child(child)

    # Style -----------------------------------------------------------------

    @property
    def computed_style(self) -> Style:
        """Own style with unset fields resolved through the parent chain."""
        parent = self.parent
        if parent is None:
            return self.style
        return parent.computed_style.merge(self.style)

    def apply_style(self, style: Style):
        """Explicitly set the fields of ``style`` on this atom."""
        self.style = self.style.merge(style)

    # Conversion ------------------------------------------------------------

    def serialize(self, options) -> str:
        if self.verbatim_latex is not None:
            return self.verbatim_latex
        return self.command

    def render(self, context) -> Optional[Box]:
        return Box(value=self.value)

    def to_json(self) -> Dict[str, Any]:
        result: Dict[str, Any] = {
            'type': self.kind,
            'command': self.command,
            'mode': self.mode,
        }
        if self.value is not None:
            result['value'] = self.value
        if not self.style.is_empty:
            result['style'] = self.style.to_dict()
        if self.verbatim_latex is not None:
            result['verbatimLatex'] = self.verbatim_latex
        if self._children:
            result['children'] = [child.to_json() for child in self._children]
        return result

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Atom':
        atom = cls(
            data.get('type'),
            data.get('command', ''),
            style=Style.from_dict(data.get('style')),
            value=data.get('value'),
            mode=data.get('mode', 'math'),
            verbatim_latex=data.get('verbatimLatex'),
        )
        for child in data.get('children', []):
            atom.append_child(atom_from_json(child))
        return atom


class TextAtom(Atom):
    """A run of literal text: a single glyph in practice."""

    kind = 'text'

    def __init__(self, command: str, value: str, style: Optional[Style] = None,
                 verbatim_latex: Optional[str] = None):
        super().__init__(command=command, style=style, value=value,
                         mode='text', verbatim_latex=verbatim_latex)

    def serialize(self, options) -> str:
        if self.verbatim_latex is not None:
            return self.verbatim_latex
        return char_to_latex('text', ord(self.value)) if len(self.value) == 1 else self.value

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'TextAtom':
        return cls(
            data.get('command', data.get('value', '')),
            data.get('value', ''),
            style=Style.from_dict(data.get('style')),
            verbatim_latex=data.get('verbatimLatex'),
        )


def _serialize_children(atom: Atom, options, mode: str) -> str:
    from .modes import serialize_atoms

    return serialize_atoms(
        atom.children,
        replace(options or SerializeOptions(), default_mode=mode, skip_mode_command=False),
    )


class GroupAtom(Atom):
    """A brace group, optionally switching the mode of its content."""

    kind = 'group'

    def __init__(self, children: Iterable[Atom] = (), mode: str = 'math',
                 command: str = '', change_mode: bool = False,
                 body_mode: Optional[str] = None, style: Optional[Style] = None):
        super().__init__(command=command, style=style, mode=mode)
        self.change_mode = change_mode
        self.body_mode = body_mode or mode
        for child in children:
            self.append_child(child)

    def serialize(self, options) -> str:
        body = _serialize_children(self, options, self.body_mode)
        return f"{self.command}{{{body}}}"

    def to_json(self) -> Dict[str, Any]:
        result = super().to_json()
        if self.change_mode:
            result['changeMode'] = True
            result['bodyMode'] = self.body_mode
        return result

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'GroupAtom':
        return cls(
            [atom_from_json(child) for child in data.get('children', [])],
            mode=data.get('mode', 'math'),
            command=data.get('command', ''),
            change_mode=data.get('changeMode', False),
            body_mode=data.get('bodyMode'),
            style=Style.from_dict(data.get('style')),
        )


class BoxAtom(Atom):
    """A framed box (\\fbox, \\fcolorbox)."""

    kind = 'box'

    def __init__(self, children: Iterable[Atom] = (), mode: str = 'text',
                 command: str = '\\fbox', frame_color: Optional[str] = None,
                 background: Optional[str] = None, style: Optional[Style] = None):
        super().__init__(command=command, style=style, mode=mode)
        self.frame_color = frame_color
        self.background = background
        for child in children:
            self.append_child(child)

    @property
    def paints_background(self) -> bool:
        # Only \fcolorbox fills its box; \fbox is transparent
        return self.background is not None

    def serialize(self, options) -> str:
        body = _serialize_children(self, options, 'text')
        if self.command == '\\fcolorbox':
            return f"\\fcolorbox{{{self.frame_color}}}{{{self.background}}}{{{body}}}"
        return f"{self.command}{{{body}}}"

    def render(self, context) -> Optional[Box]:
        box = Box(children=[c for c in (a.render(context) for a in self.children) if c])
        if self.background:
            box.set_style('background-color', self.background)
        if self.frame_color:
            box.set_style('border-color', self.frame_color)
        return box

    def to_json(self) -> Dict[str, Any]:
        result = super().to_json()
        if self.frame_color is not None:
            result['framecolor'] = self.frame_color
        if self.background is not None:
            result['backgroundcolor'] = self.background
        return result

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'BoxAtom':
        return cls(
            [atom_from_json(child) for child in data.get('children', [])],
            mode=data.get('mode', 'text'),
            command=data.get('command', '\\fbox'),
            frame_color=data.get('framecolor'),
            background=data.get('backgroundcolor'),
            style=Style.from_dict(data.get('style')),
        )


def default_atom_kinds() -> Dict[str, Type[Atom]]:
    """Map of persisted ``type`` tags to atom classes."""
    from .delimiters import DelimAtom, SizedDelimAtom

    return {
        'text': TextAtom,
        'group': GroupAtom,
        'box': BoxAtom,
        'delim': DelimAtom,
        'sizeddelim': SizedDelimAtom,
    }


def atom_from_json(data: Dict[str, Any],
                   kinds: Optional[Dict[str, Type[Atom]]] = None) -> Atom:
    """Rebuild an atom (and its subtree) from ``Atom.to_json`` output."""
    kinds = kinds or default_atom_kinds()
    kind = data.get('type')
    cls = kinds.get(kind)
    if cls is None:
        logger.debug(f"No atom class for type {kind!r}, loading as plain Atom")
        cls = Atom
    return cls.from_json(data)
