import pytest
from pyv_cachesim.cache.policy import (
    ReplacementPolicy, FIFOSet, LFUSet, LRUSet, RoundRobinSet, make_set,
)

A, B, C, D, E = 0xA, 0xB, 0xC, 0xD, 0xE


class TestReplacementPolicyParse:
    def test_absent_policy_is_fifo(self):
        assert ReplacementPolicy.parse(None) is ReplacementPolicy.FIFO

    @pytest.mark.parametrize("value, expected", [
        ("lru", ReplacementPolicy.LRU),
        ("lfu", ReplacementPolicy.LFU),
        ("rr", ReplacementPolicy.RR),
        ("fifo", ReplacementPolicy.FIFO),
    ])
    def test_known_policies(self, value, expected):
        assert ReplacementPolicy.parse(value) is expected

    @pytest.mark.parametrize("value", ["mru", "", "random", 3, "LRU", " rr ", "Lfu"])
    def test_unknown_policy_rejected(self, value):
        with pytest.raises(ValueError, match="Unknown replacement policy"):
            ReplacementPolicy.parse(value)

    def test_str_is_config_value(self):
        assert str(ReplacementPolicy.RR) == "rr"


def test_make_set_dispatch():
    assert isinstance(make_set(ReplacementPolicy.LRU, 2), LRUSet)
    assert isinstance(make_set(ReplacementPolicy.LFU, 2), LFUSet)
    assert isinstance(make_set(ReplacementPolicy.RR, 2), RoundRobinSet)
    assert isinstance(make_set(ReplacementPolicy.FIFO, 2), FIFOSet)


@pytest.mark.parametrize("policy", list(ReplacementPolicy))
def test_fill_without_eviction(policy):
    s = make_set(policy, 4)
    for tag in (A, B, C, D):
        assert s.access(tag) == (False, None)
    assert len(s) == 4
    assert s.is_full()
    assert s.access(B) == (True, None)


def test_zero_associativity_rejected():
    with pytest.raises(ValueError):
        LRUSet(0)


class TestLRU:
    def test_reaccessed_tag_survives(self):
        s = LRUSet(2)
        s.access(A)
        s.access(B)
        assert s.access(A) == (True, None)

        # B is now the least recently used
        assert s.access(D) == (False, B)
        assert A in s and D in s

    def test_victim_without_hits_is_oldest(self):
        s = LRUSet(2)
        s.access(A)
        s.access(B)
        assert s.access(C) == (False, A)
        # A comes back as a miss and pushes out B
        assert s.access(A) == (False, B)
        assert s.access(D) == (False, C)

    def test_recency_order(self):
        s = LRUSet(3)
        for tag in (A, B, C):
            s.access(tag)
        s.access(A)
        assert s.resident() == [B, C, A]


class TestLFU:
    def test_least_frequent_evicted(self):
        s = LFUSet(2)
        s.access(A)
        s.access(B)
        for _ in range(3):
            assert s.access(A) == (True, None)
        assert s.frequency(A) == 4
        assert s.frequency(B) == 1

        assert s.access(C) == (False, B)
        assert s.frequency(B) == 0
        assert s.frequency(C) == 1

    def test_tie_goes_to_earliest_inserted(self):
        s = LFUSet(3)
        for tag in (A, B, C):
            s.access(tag)
        s.access(B)
        # A and C both have frequency 1; A was inserted first
        assert s.access(D) == (False, A)
        # C and D tie at 1; C is older
        assert s.access(E) == (False, C)

    def test_hit_does_not_change_insertion_order(self):
        s = LFUSet(2)
        s.access(A)
        s.access(B)
        s.access(A)
        s.access(B)
        # Frequencies tie at 2, A was inserted first
        assert s.access(C) == (False, A)


class TestRoundRobin:
    def test_pointer_rotates_independent_of_hits(self):
        s = RoundRobinSet(2)
        s.access(A)
        s.access(B)
        assert s.pointer == 0

        assert s.access(C) == (False, A)
        assert s.slots == [C, B]
        assert s.pointer == 1

        # Recency of B does not protect it
        assert s.access(B) == (True, None)
        assert s.access(D) == (False, B)
        assert s.slots == [C, D]
        assert s.pointer == 0

        assert s.access(C) == (True, None)
        assert s.access(E) == (False, C)
        assert s.pointer == 1

    def test_hits_do_not_move_pointer(self):
        s = RoundRobinSet(4)
        for tag in (A, B, C, D):
            s.access(tag)
        for tag in (D, C, B, A):
            s.access(tag)
        assert s.pointer == 0
        assert s.access(E) == (False, A)


class TestFIFO:
    def test_oldest_inserted_evicted_despite_hits(self):
        s = FIFOSet(2)
        s.access(A)
        s.access(B)
        assert s.access(A) == (True, None)
        assert s.access(C) == (False, A)
        assert s.access(D) == (False, B)
        assert s.resident() == [C, D]
