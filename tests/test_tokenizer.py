import pytest
from math_atoms.tokenizer import (
    tokenize, join_latex, find_group_end,
    SPACE, GROUP_OPEN, GROUP_CLOSE, INLINE_MATH, DISPLAY_MATH
)


class TestTokenize:

    def test_plain_text(self):
        """Test characters and collapsed whitespace."""
        assert tokenize("a  b") == ['a', SPACE, 'b']

    def test_control_word_eats_following_space(self):
        """Test that whitespace after a control word is dropped."""
        assert tokenize(r"\S a") == ['\\S', 'a']

    def test_control_symbol_keeps_following_space(self):
        """Test that whitespace after a control symbol is kept."""
        assert tokenize(r"\$ a") == ['\\$', SPACE, 'a']

    def test_math_shifts(self):
        """Test inline and display math markers."""
        tokens = tokenize("$x$ $$y$$")
        assert tokens == [INLINE_MATH, 'x', INLINE_MATH, SPACE, DISPLAY_MATH, 'y', DISPLAY_MATH]

    def test_braces(self):
        """Test brace sentinels."""
        assert tokenize("{a}") == [GROUP_OPEN, 'a', GROUP_CLOSE]

    def test_comment_removed(self):
        """Test that comments run to the end of the line."""
        assert tokenize("a% note\nb") == ['a', 'b']

    def test_empty_input(self):
        """Test with empty input."""
        assert tokenize("") == []


class TestJoinLatex:

    def test_separates_control_word_and_letter(self):
        """Test that a letter after a control word gets a space."""
        assert join_latex(['\\S', 'a']) == '\\S a'

    def test_protects_space_after_control_word(self):
        """Test that a leading space after a control word is kept visible."""
        assert join_latex(['\\S', ' a']) == '\\S{} a'
        assert tokenize(join_latex(['\\S', ' a'])) == ['\\S', GROUP_OPEN, GROUP_CLOSE, SPACE, 'a']

    def test_no_separator_needed(self):
        """Test fragments that cannot merge."""
        assert join_latex(['\\textbf{a}', 'b']) == '\\textbf{a}b'
        assert join_latex(['\\S', '\\P']) == '\\S\\P'
        assert join_latex(['a', '', 'b']) == 'ab'


class TestFindGroupEnd:

    def test_skips_nested_groups(self):
        """Test that nested groups are balanced."""
        tokens = ['a', GROUP_OPEN, 'b', GROUP_CLOSE, GROUP_CLOSE, 'c']
        assert find_group_end(tokens, 0) == 4

    def test_unbalanced(self):
        """Test that no closing brace yields None."""
        assert find_group_end(['a', GROUP_OPEN, 'b'], 0) is None
