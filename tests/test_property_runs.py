import pytest
from math_atoms.atoms import GroupAtom
from math_atoms.models import Style
from math_atoms.modes import get_property_runs, get_mode_runs


class TestGetPropertyRuns:

    def test_splits_on_changes(self, make_text):
        """Test maximal runs of equal values."""
        atoms = [make_text('a'), make_text('b', color='red'),
                 make_text('c', color='red'), make_text('d')]
        runs = get_property_runs(atoms, 'color')
        assert [[a.value for a in run] for run in runs] == [['a'], ['b', 'c'], ['d']]

    def test_concatenation_is_input(self, make_text):
        """Test that partitioning neither drops nor reorders atoms."""
        atoms = [make_text(c, font_size=s) for c, s in zip('abcde', (1, 1, None, 2, 2))]
        runs = get_property_runs(atoms, 'font_size')
        assert [a for run in runs for a in run] == atoms
        assert len(runs) == 3

    def test_input_unchanged(self, make_text):
        """Test that the input list is not modified."""
        atoms = [make_text('a', color='red'), make_text('b')]
        copy = list(atoms)
        get_property_runs(atoms, 'color')
        assert atoms == copy

    def test_empty(self):
        """Test with no atoms."""
        assert get_property_runs([], 'color') == []

    def test_uses_own_style(self, make_text):
        """Test that inherited values do not join runs."""
        inherited = make_text('a')
        group = GroupAtom([inherited], mode='text', style=Style(color='red'))
        explicit = make_text('b', color='red')
        assert inherited.computed_style.color == group.style.color

        runs = get_property_runs([inherited, explicit], 'color')
        assert len(runs) == 2


class TestGetModeRuns:

    def test_mixed_modes(self, make_text, make_mord):
        """Test splitting by mode."""
        atoms = [make_text('a'), make_mord('x'), make_mord('y'), make_text('b')]
        runs = get_mode_runs(atoms)
        assert [[a.mode for a in run] for run in runs] == [['text'], ['math', 'math'], ['text']]
