"""Tests for best-score persistence."""

import json

from pocket_arcade.wallet.best_scores import BestScoreStore


class TestReadWrite:
    def test_missing_key_reads_default(self) -> None:
        store = BestScoreStore()
        assert store.read("snake-best-score") == 0
        assert store.read("snake-best-score", default=-1) == -1
        assert not store.has("snake-best-score")

    def test_last_write_wins(self) -> None:
        store = BestScoreStore()
        store.write("snake-best-score", 50)
        store.write("snake-best-score", 20)
        assert store.read("snake-best-score") == 20

    def test_persisted_as_integer_strings(self, tmp_path) -> None:
        path = tmp_path / "scores" / "best.json"
        BestScoreStore(path).write("2048-best-score", 1024)

        assert json.loads(path.read_text()) == {"2048-best-score": "1024"}
        assert BestScoreStore(path).read("2048-best-score") == 1024


class TestSubmit:
    def test_higher_is_better(self) -> None:
        store = BestScoreStore()
        assert store.submit("breakout-best-score", 100)
        assert not store.submit("breakout-best-score", 90)
        assert not store.submit("breakout-best-score", 100)
        assert store.submit("breakout-best-score", 150)
        assert store.read("breakout-best-score") == 150

    def test_zero_is_not_a_first_best(self) -> None:
        store = BestScoreStore()
        assert not store.submit("snake-best-score", 0)
        assert not store.has("snake-best-score")

    def test_lower_is_better(self) -> None:
        store = BestScoreStore()
        assert store.submit("memory-match-best-score", 12, lower_is_better=True)
        assert store.submit("memory-match-best-score", 9, lower_is_better=True)
        assert not store.submit("memory-match-best-score", 10, lower_is_better=True)
        assert store.read("memory-match-best-score") == 9


class TestCorruption:
    def test_unparsable_file(self, tmp_path) -> None:
        path = tmp_path / "best.json"
        path.write_text("{not json")
        store = BestScoreStore(path)
        assert store.read("snake-best-score") == 0
        assert store.submit("snake-best-score", 10)

    def test_non_object_file(self, tmp_path) -> None:
        path = tmp_path / "best.json"
        path.write_text("[1, 2, 3]")
        assert BestScoreStore(path).read("snake-best-score") == 0

    def test_unparsable_value(self, tmp_path) -> None:
        path = tmp_path / "best.json"
        path.write_text(json.dumps({"snake-best-score": "lots", "2048-best-score": "64"}))
        store = BestScoreStore(path)
        assert store.read("snake-best-score") == 0
        assert store.read("2048-best-score") == 64
        assert store.submit("snake-best-score", 5)
