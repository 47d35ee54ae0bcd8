"""
Delimiter atoms: plain fences and sized fences (\\bigl( ... \\Biggr])
"""

import logging
from typing import Dict, Optional, Any, Tuple

from .models import Style
from .boxes import Box
from .atoms import Atom


logger = logging.getLogger(__name__)


DELIMITER_SIZES = (1, 2, 3, 4)

# Sizing command -> (size class, delimiter class for the renderer)
SIZED_DELIMITER_COMMANDS: Dict[str, Tuple[int, str]] = {}
for _size, _stem in enumerate(('big', 'Big', 'bigg', 'Bigg'), start=1):
    SIZED_DELIMITER_COMMANDS['\\' + _stem] = (_size, 'mord')
    SIZED_DELIMITER_COMMANDS['\\' + _stem + 'l'] = (_size, 'mopen')
    SIZED_DELIMITER_COMMANDS['\\' + _stem + 'r'] = (_size, 'mclose')
    SIZED_DELIMITER_COMMANDS['\\' + _stem + 'm'] = (_size, 'mrel')


def _check_size(size: Optional[int]) -> Optional[int]:
    if size is not None and size not in DELIMITER_SIZES:
        raise ValueError(f"Delimiter size must be one of {DELIMITER_SIZES}, got {size!r}")
    return size


def serialize_delimiter(command: str, value: str) -> str:
    """``\\cmd(`` for one-character delimiters, ``\\cmd{\\langle}`` otherwise."""
    if len(value) == 1:
        return command + value
    return f"{command}{{{value}}}"


class DelimAtom(Atom):
    """A single unsized fence glyph, e.g. the argument of ``\\middle``."""

    kind = 'delim'

    def __init__(self, command: str, delim: str, size: Optional[int] = None,
                 style: Optional[Style] = None, mode: str = 'math'):
        super().__init__(command=command, style=style, value=delim, mode=mode)
        self.size = _check_size(size)

    def render(self, context) -> Optional[Box]:
        return Box(delim=self.value)

    def serialize(self, options) -> str:
        return serialize_delimiter(self.command, self.value)

    def to_json(self) -> Dict[str, Any]:
        result = super().to_json()
        result['delim'] = result.pop('value', self.value)
        result['size'] = self.size
        return result

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'DelimAtom':
        return cls(
            data.get('command', ''),
            data.get('delim', data.get('value', '.')),
            size=data.get('size'),
            style=Style.from_dict(data.get('style')),
            mode=data.get('mode', 'math'),
        )


class SizedDelimAtom(Atom):
    """A fence glyph drawn at one of four discrete sizes."""

    kind = 'sizeddelim'

    def __init__(self, command: str, delim: str, delim_class: str = 'mord',
                 size: int = 1, style: Optional[Style] = None, mode: str = 'math'):
        super().__init__(command=command, style=style, value=delim, mode=mode)
        self.delim_class = delim_class
        self.size = _check_size(size)

    def render(self, context) -> Optional[Box]:
        box = context.make_sized_delim(self.value, self.size, classes=self.delim_class)
        if box is None:
            logger.debug(f"No glyph for {self.value!r} at size {self.size}")
            return None
        box = context.bind(self, box)
        if self.caret:
            box.caret = self.caret
        return box

    def serialize(self, options) -> str:
        return serialize_delimiter(self.command, self.value)

    def to_json(self) -> Dict[str, Any]:
        result = super().to_json()
        result['delim'] = result.pop('value', self.value)
        result['size'] = self.size
        result['delimClass'] = self.delim_class
        return result

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'SizedDelimAtom':
        return cls(
            data.get('command', ''),
            data.get('delim', data.get('value', '.')),
            delim_class=data.get('delimClass', 'mord'),
            size=data.get('size', 1),
            style=Style.from_dict(data.get('style')),
            mode=data.get('mode', 'math'),
        )
