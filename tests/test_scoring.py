from __future__ import annotations

import threading
import time

from core.config import ScoringConfig
from core.models import DailyResult
from core.scoring import ScoringEngine


def test_first_result_inserts_player(storage) -> None:
    engine = ScoringEngine(storage)

    report = engine.apply(DailyResult({"alice": 2}))

    assert storage.rows == {"alice": (2, 1)}
    assert report.scored == {"alice": 2}
    assert report.penalized == []


def test_present_player_scored_and_absent_player_penalized(storage) -> None:
    storage.seed("alice", 5, 2)
    storage.seed("bob", 10, 3)
    engine = ScoringEngine(storage)

    report = engine.apply(DailyResult({"alice": 1}))

    assert storage.rows["alice"] == (6, 3)
    assert storage.rows["bob"] == (17, 3)
    assert report.penalized == ["bob"]


def test_new_player_gets_no_penalty_logic(storage) -> None:
    storage.seed("alice", 4, 1)
    engine = ScoringEngine(storage)

    engine.apply(DailyResult({"alice": 3, "dave": 7}))

    assert storage.rows == {"alice": (7, 2), "dave": (7, 1)}


def test_excluded_player_never_penalized(storage) -> None:
    storage.seed("alice", 5, 2)
    storage.seed("lurker", 0, 0)
    engine = ScoringEngine(storage, ScoringConfig(excluded_players=frozenset({"lurker"})))

    report = engine.apply(DailyResult({"alice": 3}))
    engine.apply(DailyResult({"alice": 3}))

    assert storage.rows["lurker"] == (0, 0)
    assert "lurker" not in report.penalized


def test_penalty_value_is_independent_of_failure_score(storage) -> None:
    storage.seed("bob", 10, 2)
    engine = ScoringEngine(storage, ScoringConfig(failure_score=7, absence_penalty=5))

    engine.apply(DailyResult({}))

    assert storage.rows["bob"] == (15, 2)


def test_empty_day_penalizes_everyone_known(storage) -> None:
    storage.seed("alice", 3, 1)
    storage.seed("bob", 4, 1)
    engine = ScoringEngine(storage)

    report = engine.apply(DailyResult())

    assert storage.rows == {"alice": (10, 1), "bob": (11, 1)}
    assert report.penalized == ["alice", "bob"]


def test_applying_without_key_double_counts(storage) -> None:
    storage.seed("bob", 10, 3)
    engine = ScoringEngine(storage)
    daily = DailyResult({"alice": 2})

    engine.apply(daily)
    engine.apply(daily)

    assert storage.rows["alice"] == (4, 2)
    assert storage.rows["bob"] == (24, 3)


def test_applying_same_key_twice_is_refused(storage) -> None:
    storage.seed("bob", 10, 3)
    engine = ScoringEngine(storage)
    daily = DailyResult({"alice": 2})

    first = engine.apply(daily, results_key="abc")
    second = engine.apply(daily, results_key="abc")

    assert not first.skipped_duplicate
    assert second.skipped_duplicate
    assert storage.rows == {"alice": (2, 1), "bob": (17, 3)}
    assert storage.processed == {"abc"}


def test_failed_player_list_skips_penalties_but_still_scores(storage) -> None:
    storage.seed("alice", 5, 2)
    storage.seed("bob", 10, 3)
    storage.fail_list = True
    engine = ScoringEngine(storage)

    report = engine.apply(DailyResult({"alice": 1}))

    assert storage.rows == {"alice": (6, 3), "bob": (10, 3)}
    assert report.penalized == []


def test_failed_write_only_loses_that_player(storage) -> None:
    storage.seed("alice", 5, 2)
    storage.seed("bob", 10, 3)
    storage.fail_writes_for = {"alice"}
    engine = ScoringEngine(storage)

    report = engine.apply(DailyResult({"alice": 1, "carol": 4}))

    assert storage.rows["alice"] == (5, 2)
    assert storage.rows["carol"] == (4, 1)
    assert storage.rows["bob"] == (17, 3)
    assert report.failed == ["alice"]


def test_each_player_written_once_per_batch(storage) -> None:
    storage.seed("alice", 5, 2)
    storage.seed("bob", 10, 3)
    engine = ScoringEngine(storage)

    engine.apply(DailyResult({"alice": 1, "carol": 2}))

    assert sorted(storage.writes) == ["alice", "bob", "carol"]


def test_concurrent_runs_lose_no_updates(storage, monkeypatch) -> None:
    storage.seed("bob", 0, 1)
    engine = ScoringEngine(storage)
    read_entry = storage.get_entry

    def slow_get_entry(player_id):
        entry = read_entry(player_id)
        time.sleep(0.001)
        return entry

    monkeypatch.setattr(storage, "get_entry", slow_get_entry)

    threads = [
        threading.Thread(target=engine.apply, args=(DailyResult({"alice": 1}),))
        for _ in range(20)
    ]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert storage.rows["alice"] == (20, 20)
    assert storage.rows["bob"] == (140, 1)


def test_penalty_for_vanished_row_inserts_without_days(storage, monkeypatch) -> None:
    storage.seed("alice", 5, 2)
    storage.seed("bob", 10, 3)
    engine = ScoringEngine(storage)
    read_entry = storage.get_entry

    # bob is listed as known but the row is gone when it is read back.
    monkeypatch.setattr(
        storage,
        "get_entry",
        lambda player_id: None if player_id == "bob" else read_entry(player_id),
    )

    report = engine.apply(DailyResult({"alice": 1}))

    assert storage.rows["bob"] == (7, 0)
    assert report.penalized == ["bob"]
