from dataclasses import replace
from typing import Dict, Iterator, Optional, Sequence
import logging
from .base_mode import Mode, get_property_runs, get_mode_runs
from .text_mode import TextMode
from .math_mode import MathMode
from ..atoms import Atom
from ..config import SerializeOptions
from ..tokenizer import join_latex


logger = logging.getLogger(__name__)


class ModeRegistry:
    """Mapping from mode name to the mode that parses and serializes it."""

    def __init__(self, modes: Sequence[Mode] = ()):
        self._modes: Dict[str, Mode] = {}
        for mode in modes:
            self.register(mode)

    def register(self, mode: Mode):
        if mode.name in self._modes:
            logger.debug(f"Replacing {self._modes[mode.name]!r} with {mode!r}")
        self._modes[mode.name] = mode

    def get(self, name: str) -> Mode:
        try:
            return self._modes[name]
        except KeyError:
            raise KeyError(f"Unknown mode: {name}") from None

    def __contains__(self, name: str) -> bool:
        return name in self._modes

    def __iter__(self) -> Iterator[str]:
        return iter(self._modes)


def default_registry() -> ModeRegistry:
    """Registry with the built-in math and text modes."""
    return ModeRegistry([MathMode(), TextMode()])


def serialize_atoms(atoms: Sequence[Atom], options: Optional[SerializeOptions] = None) -> str:
    """Serialize a mixed-mode atom list, one mode run at a time."""
    options = options or SerializeOptions()
    registry = options.registry or default_registry()
    if options.registry is None:
        options = replace(options, registry=registry)

    result = []
    for run in get_mode_runs(atoms):
        mode = run[0].mode
        run_options = replace(
            options,
            skip_mode_command=options.skip_mode_command or mode == options.default_mode,
        )
        result.append(registry.get(mode).serialize(run, run_options))
    return join_latex(result)


__all__ = [
    'Mode',
    'ModeRegistry',
    'TextMode',
    'MathMode',
    'default_registry',
    'get_property_runs',
    'get_mode_runs',
    'serialize_atoms',
]
