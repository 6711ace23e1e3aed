"""
Tests for ChainState
====================
Tests for the immutable context window in markovkit/state.py.
"""

import copy
import pickle
import pytest
import sys
from pathlib import Path

# Ensure repo root is on path
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from markovkit.state import ChainState


SAMPLES = ["a", "ab", "abc", "aaa"]


class TestChainStateInit:
    """Tests for ChainState construction."""

    def test_none_raises(self):
        """Test that a missing source collection is rejected."""
        with pytest.raises(ValueError):
            ChainState(None)

    def test_copies_items(self):
        """Test that later changes to the source list do not leak in."""
        source = ['a', 'b']
        state = ChainState(source)
        source.append('c')
        assert state.items == ('a', 'b')

    def test_accepts_any_iterable(self):
        """Test construction from strings, generators and tuples."""
        assert ChainState("ab") == ChainState(iter(['a', 'b'])) == ChainState(('a', 'b'))

    def test_empty_state(self):
        """Test the empty start state."""
        state = ChainState(())
        assert len(state) == 0
        assert list(state) == []


class TestChainStateEquality:
    """Tests for value equality and hashing."""

    @pytest.mark.parametrize("value", SAMPLES)
    def test_same_value_equal(self, value):
        """Test that independently built states of the same value are equal."""
        a = ChainState(value)
        b = ChainState(value)
        assert a == b
        assert not (a != b)
        assert hash(a) == hash(b)

    @pytest.mark.parametrize("value", SAMPLES)
    def test_same_reference_equal(self, value):
        """Test that a state equals itself."""
        a = ChainState(value)
        assert a == a

    @pytest.mark.parametrize("value", SAMPLES)
    def test_not_equal_to_none(self, value):
        """Test that comparing with None is False, never an error."""
        a = ChainState(value)
        assert a != None  # noqa: E711

    @pytest.mark.parametrize("first", SAMPLES)
    @pytest.mark.parametrize("second", SAMPLES)
    def test_different_values_not_equal(self, first, second):
        """Test that distinct sequences give distinct states."""
        if first == second:
            pytest.skip("same value")
        assert ChainState(first) != ChainState(second)

    def test_order_sensitive(self):
        """Test that the same symbols in another order are a different state."""
        assert ChainState("ab") != ChainState("ba")
        assert len({ChainState("ab"), ChainState("ba")}) == 2

    def test_usable_as_dict_key(self):
        """Test lookups with an equal but distinct state object."""
        table = {ChainState("fo"): 1}
        assert table[ChainState(['f', 'o'])] == 1

    def test_not_equal_to_tuple(self):
        """Test that a state is not equal to a bare tuple of its items."""
        assert ChainState("ab") != ('a', 'b')


class TestChainStateImmutability:
    """Tests that states cannot be mutated."""

    def test_setattr_raises(self):
        state = ChainState("ab")
        with pytest.raises(AttributeError):
            state._items = ('x',)

    def test_delattr_raises(self):
        state = ChainState("ab")
        with pytest.raises(AttributeError):
            del state._items

    def test_copy_and_pickle(self):
        """Test that copies compare equal to the original."""
        state = ChainState("abc")
        assert copy.copy(state) == state
        assert copy.deepcopy(state) == state
        assert pickle.loads(pickle.dumps(state)) == state


class TestChainStateWindow:
    """Tests for truncate() and push()."""

    def test_truncate_keeps_most_recent(self):
        assert ChainState("fool").truncate(2) == ChainState("ol")

    def test_truncate_short_returns_self(self):
        state = ChainState("ab")
        assert state.truncate(5) is state

    def test_truncate_zero(self):
        assert ChainState("abc").truncate(0) == ChainState(())

    def test_truncate_negative_raises(self):
        with pytest.raises(ValueError):
            ChainState("abc").truncate(-1)

    def test_push_grows_until_order(self):
        state = ChainState(())
        state = state.push('a', 3)
        state = state.push('b', 3)
        assert state == ChainState("ab")

    def test_push_drops_oldest(self):
        """Test the FIFO behavior once the window is full."""
        assert ChainState("abc").push('d', 3) == ChainState("bcd")

    def test_push_order_one(self):
        assert ChainState("abc").push('d', 1) == ChainState("d")

    def test_push_order_zero(self):
        assert ChainState("abc").push('d', 0) == ChainState(())

    def test_push_returns_new_state(self):
        state = ChainState("ab")
        pushed = state.push('c', 3)
        assert state == ChainState("ab")
        assert pushed is not state

    def test_of_truncates(self):
        assert ChainState.of("fool", 3) == ChainState("ool")

    def test_of_reuses_state(self):
        state = ChainState("ab")
        assert ChainState.of(state, 2) is state

    def test_of_none_raises(self):
        with pytest.raises(ValueError):
            ChainState.of(None, 2)

    def test_sequence_protocol(self):
        state = ChainState("abc")
        assert state[0] == 'a'
        assert state[-1] == 'c'
        assert "ChainState" in repr(state)
