"""Tests for parachain validator records."""

from __future__ import annotations

from scouty.records import ParaRecords, SessionIndex

ACTIVE = ["alice", "bob", "carol", "dave"]


def make_records(stashes: tuple[str, ...] = ("carol",)) -> ParaRecords:
    records = ParaRecords.watching(stashes)
    records.reset_watchlist(ACTIVE)
    return records


class TestWatchlist:
    """Tests for resolving configured stashes to authority indices."""

    def test_positions(self) -> None:
        records = make_records(("dave", "alice"))
        assert records.watchlist == [("dave", 3), ("alice", 0)]

    def test_inactive_stashes_dropped(self) -> None:
        records = make_records(("mallory", "bob"))
        assert records.watchlist == [("bob", 1)]

    def test_reset_replaces_positions(self) -> None:
        records = make_records()
        records.reset_watchlist(["carol", "alice"])
        assert records.watchlist == [("carol", 0)]


class TestInsertRecord:
    """Tests for per-session membership."""

    def test_membership_by_position(self) -> None:
        records = make_records()
        records.insert_record(5, [1, 2, 7])
        assert records.is_para_validator("carol")

        records.insert_record(6, [1, 7])
        assert not records.is_para_validator("carol")
        assert records.previous_six_sessions_total("carol") == 1

    def test_same_session_is_noop(self) -> None:
        records = make_records()
        assert records.insert_record(5, [2])
        assert not records.insert_record(5, [])
        assert records.is_para_validator("carol")
        assert records.records == {(SessionIndex(5), "carol"): True}

    def test_unknown_stash(self) -> None:
        records = make_records()
        records.insert_record(1, [0, 1, 2, 3])
        assert not records.is_para_validator("mallory")
        assert records.previous_six_sessions_total("mallory") == 0

    def test_first_observation_does_not_evict(self) -> None:
        records = make_records()
        records.records[(SessionIndex(3), "carol")] = True
        records.insert_record(10, [2])
        assert (SessionIndex(3), "carol") in records.records

    def test_eviction_uses_previous_session(self) -> None:
        records = make_records()
        records.insert_record(3, [2])
        records.insert_record(10, [2])
        # Evicts from the previous session, 3 - 7, which does not exist.
        assert (SessionIndex(3), "carol") in records.records

        # Evicts 10 - 7 = 3.
        records.insert_record(11, [2])
        assert (SessionIndex(3), "carol") not in records.records


class TestRollingTotals:
    """Tests for the six-session window."""

    def test_counts_true_sessions_only(self) -> None:
        records = make_records()
        for session in range(1, 10):
            records.insert_record(session, [2] if session % 2 else [])

        # Window 3..8: sessions 3, 5 and 7 are odd.
        assert records.previous_six_sessions_total("carol") == 3
        assert records.is_para_validator("carol")

    def test_steady_state_retention(self) -> None:
        records = make_records()
        for session in range(1, 30):
            records.insert_record(session, [2])

        # Eviction trails one session behind, so eight sessions remain.
        assert sorted(int(key[0]) for key in records.records) == list(range(22, 30))
