"""Tests for authored-block records."""

from __future__ import annotations

from hypothesis import given
from hypothesis import strategies as st

from scouty.records import AuthorityIndex, AuthorityRecords, RecordOutcome, SessionIndex

AUTHORITIES = ["alice", "bob", "carol", "dave", "eve"]


def make_records(watched: tuple[str, ...] = ("dave",), session: int = 10) -> AuthorityRecords:
    records = AuthorityRecords.watching(watched)
    records.set_authorities(AUTHORITIES)
    records.set_session(session)
    return records


class TestInsertRecord:
    """Tests for counting authored blocks."""

    def test_counts_watched_author(self) -> None:
        """Four blocks at index 3, then a new session."""
        records = make_records()
        for block in range(1, 5):
            assert records.insert_record(block, AuthorityIndex(3)) is RecordOutcome.RECORDED

        assert records.current_session_total("dave") == 4

        records.set_session(11)
        assert records.previous_session_total("dave") == 4
        assert records.current_session_total("dave") == 0

    def test_duplicate_block_counted_once(self) -> None:
        records = make_records()
        assert records.insert_record(5, 3) is RecordOutcome.RECORDED
        assert records.insert_record(5, 3) is RecordOutcome.DUPLICATE
        assert records.current_session_total("dave") == 1

    def test_block_zero_is_duplicate_of_initial_state(self) -> None:
        records = make_records()
        assert records.insert_record(0, 3) is RecordOutcome.DUPLICATE

    def test_no_authority(self) -> None:
        records = make_records()
        assert records.insert_record(1, None) is RecordOutcome.NO_AUTHORITY
        assert records.records == {}
        # The block still counts as processed.
        assert records.insert_record(1, 3) is RecordOutcome.DUPLICATE

    def test_out_of_range_index(self) -> None:
        records = make_records()
        assert records.insert_record(1, 5) is RecordOutcome.UNKNOWN_AUTHORITY
        assert records.records == {}

    def test_negative_index_fails_closed(self) -> None:
        records = make_records(watched=("eve",))
        assert records.insert_record(1, -1) is RecordOutcome.UNKNOWN_AUTHORITY
        assert records.current_session_total("eve") == 0

    def test_unwatched_author(self) -> None:
        records = make_records()
        assert records.insert_record(1, 0) is RecordOutcome.NOT_WATCHED
        assert records.records == {}

    def test_empty_authority_set_fails_closed(self) -> None:
        records = AuthorityRecords.watching(["dave"])
        assert records.insert_record(1, 0) is RecordOutcome.UNKNOWN_AUTHORITY

    def test_multiple_watched_stashes(self) -> None:
        records = make_records(watched=("alice", "dave"))
        records.insert_record(1, 0)
        records.insert_record(2, 3)
        records.insert_record(3, 3)
        assert records.current_session_total("alice") == 1
        assert records.current_session_total("dave") == 2


class TestRetention:
    """Tests for eviction of old sessions."""

    def test_evicts_session_seven_back(self) -> None:
        records = make_records(session=3)
        records.insert_record(1, 3)

        records.set_session(10)
        records.insert_record(2, 3)

        assert (SessionIndex(3), "dave") not in records.records
        assert records.records == {(SessionIndex(10), "dave"): 1}

    def test_eviction_is_per_stash(self) -> None:
        records = make_records(watched=("alice", "dave"), session=3)
        records.insert_record(1, 0)
        records.insert_record(2, 3)

        records.set_session(10)
        records.insert_record(3, 3)

        assert (SessionIndex(3), "alice") in records.records
        assert (SessionIndex(3), "dave") not in records.records

    def test_young_chain_skips_eviction(self) -> None:
        """Sessions below seven have nothing seven sessions back."""
        records = make_records(session=0)
        records.insert_record(1, 3)
        records.set_session(2)
        records.insert_record(2, 3)
        assert records.records == {(SessionIndex(0), "dave"): 1, (SessionIndex(2), "dave"): 1}

    def test_queries_at_session_zero(self) -> None:
        records = make_records(session=0)
        assert records.previous_session_total("dave") == 0
        assert records.previous_six_sessions_total("dave") == 0


class TestRollingTotals:
    """Tests for the six-session window."""

    def test_window_excludes_current_and_seventh(self) -> None:
        records = make_records(session=0)
        block = 0
        for session in range(0, 9):
            records.set_session(session)
            for _ in range(session + 1):
                block += 1
                records.insert_record(block, 3)

        # Current session 8 had 9 blocks; sessions 2..7 had 3..8 blocks.
        assert records.current_session_total("dave") == 9
        assert records.previous_session_total("dave") == 8
        assert records.previous_six_sessions_total("dave") == sum(range(3, 9))

    def test_seed_sets_current_session(self) -> None:
        records = make_records()
        records.seed("dave", 12)
        records.insert_record(1, 3)
        assert records.current_session_total("dave") == 13

    def test_seed_ignores_unwatched(self) -> None:
        records = make_records()
        records.seed("alice", 12)
        assert records.records == {}


operations = st.lists(
    st.one_of(
        st.tuples(st.just("block"), st.one_of(st.none(), st.integers(0, 6))),
        st.tuples(st.just("repeat"), st.none()),
        st.tuples(st.just("session"), st.none()),
    ),
    max_size=80,
)


class TestProperties:
    """Model-based checks against an unbounded reference count."""

    @given(operations)
    def test_totals_match_reference(self, ops: list[tuple[str, int | None]]) -> None:
        records = make_records(watched=("bob", "dave"), session=0)
        reference: dict[tuple[int, str], int] = {}
        session = 0
        block = 0

        for kind, index in ops:
            if kind == "session":
                session += 1
                records.set_session(session)
            elif kind == "repeat":
                records.insert_record(block, 1)
            else:
                block += 1
                records.insert_record(block, index)
                if index is not None and index < len(AUTHORITIES):
                    author = AUTHORITIES[index]
                    if author in ("bob", "dave"):
                        reference[(session, author)] = reference.get((session, author), 0) + 1

            for stash in ("bob", "dave"):
                window = [session - n for n in range(1, 7) if session - n >= 0]
                assert records.current_session_total(stash) == reference.get((session, stash), 0)
                assert records.previous_six_sessions_total(stash) == sum(
                    reference.get((s, stash), 0) for s in window
                )

    @given(st.integers(min_value=8, max_value=40))
    def test_no_entries_beyond_horizon(self, sessions: int) -> None:
        """A stash authoring every session keeps at most seven sessions."""
        records = make_records(session=0)
        for session in range(sessions):
            records.set_session(session)
            records.insert_record(session + 1, 3)

        current = sessions - 1
        assert all(int(key[0]) > current - 7 for key in records.records)
        assert len(records.records) == 7
