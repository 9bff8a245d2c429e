"""Tests for the injectable random source helpers."""

import pytest

from pocket_arcade.core.rng import chance, create_random, pick, pick_index, shuffled, uniform


class TestHelpers:
    def test_pick_index_bounds(self, make_rng) -> None:
        assert pick_index(make_rng([0.0]), 4) == 0
        assert pick_index(make_rng([0.999]), 4) == 3
        assert pick_index(make_rng([0.5]), 4) == 2

    def test_pick_index_empty_range(self, make_rng) -> None:
        with pytest.raises(ValueError):
            pick_index(make_rng(), 0)

    def test_pick(self, make_rng) -> None:
        assert pick(make_rng([0.7]), ["a", "b", "c"]) == "c"

    def test_uniform(self, make_rng) -> None:
        assert uniform(make_rng([0.5]), 1000, 3000) == 2000

    def test_chance_is_strict(self, make_rng) -> None:
        assert chance(make_rng([0.59]), 0.6)
        assert not chance(make_rng([0.6]), 0.6)

    def test_shuffled_keeps_items_and_input(self, make_rng) -> None:
        items = list(range(16))
        result = shuffled(make_rng([0.3, 0.8, 0.1]), items)
        assert sorted(result) == items
        assert items == list(range(16))

    def test_shuffled_all_zero_rotates(self, make_rng) -> None:
        # j is always 0, so every element swaps with the front
        assert shuffled(make_rng([0.0]), [1, 2, 3]) == [2, 3, 1]


def test_seeded_sources_repeat() -> None:
    a, b = create_random(7), create_random(7)
    assert [a.random() for _ in range(5)] == [b.random() for _ in range(5)]
