"""Tests for the bounded history store."""

import json

import pytest

from examinator.storage.backends import FileStorage, MemoryStorage
from examinator.storage.history import HISTORY_CAPACITY, HISTORY_ENTRY, HistoryStore


class FlakyStorage(MemoryStorage):
    """Storage whose reads fail, as if the medium were unavailable."""

    def get(self, name: str):
        raise PermissionError("storage disabled")


class TestAppend:
    """Test appending results."""

    def test_append_then_list_returns_result_first(self, history_store, make_result):
        history_store.append(make_result(n=1))
        result = make_result(n=2)

        history_store.append(result)

        assert history_store.list()[0] == result

    def test_most_recent_first(self, history_store, make_result):
        for n in range(3):
            history_store.append(make_result(n=n))

        assert [r.id for r in history_store.list()] == ["result-2", "result-1", "result-0"]

    def test_capacity_is_ten(self):
        assert HISTORY_CAPACITY == 10

    def test_oldest_evicted_beyond_capacity(self, history_store, make_result):
        for n in range(11):
            history_store.append(make_result(n=n))

        ids = [r.id for r in history_store.list()]

        assert len(ids) == 10
        assert ids[0] == "result-10"
        assert ids[-1] == "result-1"
        assert "result-0" not in ids

    def test_length_never_exceeds_capacity(self, memory_storage, make_result):
        store = HistoryStore(memory_storage, capacity=3)
        for n in range(7):
            store.append(make_result(n=n))
            assert len(store.list()) <= 3

    def test_eviction_is_by_insertion_order_not_score(self, memory_storage, make_result):
        store = HistoryStore(memory_storage, capacity=2)
        store.append(make_result(n=0, score=5, total=5))
        store.append(make_result(n=1, score=0, total=5))
        store.append(make_result(n=2, score=1, total=5))

        assert [r.id for r in store.list()] == ["result-2", "result-1"]

    def test_persists_json_layout(self, history_store, memory_storage, make_result):
        history_store.append(make_result(n=1, score=4, total=5))

        stored = json.loads(memory_storage.get(HISTORY_ENTRY))

        assert stored == [
            {
                "id": "result-1",
                "date": stored[0]["date"],
                "topic": "Topic 1",
                "score": 4,
                "totalQuestions": 5,
                "difficulty": "medium",
            }
        ]

    def test_append_over_corrupt_data_starts_fresh(
        self, history_store, memory_storage, make_result
    ):
        memory_storage.set(HISTORY_ENTRY, "{not json")

        history_store.append(make_result(n=1))

        assert [r.id for r in history_store.list()] == ["result-1"]

    def test_write_failure_propagates(
        self, read_only_storage, make_result
    ):
        history = HistoryStore(read_only_storage)

        with pytest.raises(PermissionError):
            history.append(make_result(n=1))

        assert read_only_storage.get(HISTORY_ENTRY) is None

    def test_invalid_capacity_rejected(self, memory_storage):
        with pytest.raises(ValueError):
            HistoryStore(memory_storage, capacity=0)


class TestList:
    """Test reading history."""

    def test_empty_when_nothing_stored(self, history_store):
        assert history_store.list() == []

    @pytest.mark.parametrize(
        "raw",
        [
            "{not json",
            "{}",
            '"a string"',
            '[{"id": "x"}]',
            '[{"id": "x", "date": "yesterday", "topic": "A", "score": 1, '
            '"totalQuestions": 2, "difficulty": "easy"}]',
        ],
    )
    def test_malformed_data_reads_as_empty(self, history_store, memory_storage, raw):
        memory_storage.set(HISTORY_ENTRY, raw)

        assert history_store.list() == []

    def test_unavailable_storage_reads_as_empty(self):
        assert HistoryStore(FlakyStorage()).list() == []

    def test_list_is_a_snapshot(self, history_store, make_result):
        history_store.append(make_result(n=1))

        snapshot = history_store.list()
        snapshot.clear()

        assert len(history_store.list()) == 1

    def test_reads_data_written_by_another_instance(self, tmp_path, make_result):
        HistoryStore(FileStorage(tmp_path)).append(make_result(n=7))

        assert [r.id for r in HistoryStore(FileStorage(tmp_path)).list()] == ["result-7"]


class TestClear:
    """Test clearing history."""

    def test_clear_removes_everything(self, history_store, make_result):
        history_store.append(make_result(n=1))

        history_store.clear()

        assert history_store.list() == []

    def test_clear_is_idempotent(self, history_store):
        history_store.clear()
        history_store.clear()

        assert history_store.list() == []
