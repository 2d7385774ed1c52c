"""
Tests for forge/state_store.py -- progress, access log and persistence.

Validates:
    - initial state covers every phase with not-started
    - set_progress overwrites and stamps the entry
    - the access log keeps only the most recent 1000 entries
    - persistence off never touches the disk
    - load merges saved progress, drops unknown ids and trims the log
    - unreadable or malformed files yield a fresh state
"""

import json
import os
import time

import pytest
from pydantic import ValidationError

from forge.models.state import ACCESS_LOG_MAX, AccessLogEntry, PhaseStatus, utc_now
from forge.state_store import StateStore


def _entry(phase_id, uri=None, section=None):
    return AccessLogEntry(
        uri=uri or f"process://phase/{phase_id}",
        phase_id=phase_id,
        section=section,
    )


# ---------------------------------------------------------------------------
# Initial state
# ---------------------------------------------------------------------------

class TestCreateInitial:
    def test_every_phase_not_started(self, state):
        assert sorted(state.progress) == list(range(9))
        for entry in state.progress.values():
            assert entry.status is PhaseStatus.NOT_STARTED
            assert entry.note == ""

    def test_empty_access_log(self, state):
        assert state.access_log.entries == []

    def test_initial_states_are_independent(self, store):
        a = store.create_initial()
        b = store.create_initial()
        store.set_progress(a, 0, "completed")
        assert b.progress[0].status is PhaseStatus.NOT_STARTED


# ---------------------------------------------------------------------------
# Progress
# ---------------------------------------------------------------------------

class TestSetProgress:
    def test_in_progress_with_note(self, store, state):
        before = utc_now()
        store.set_progress(state, 1, "in-progress", "drafting")
        entry = state.progress[1]
        assert entry.status is PhaseStatus.IN_PROGRESS
        assert entry.note == "drafting"
        assert entry.updated_at >= before

    def test_overwrite_without_note_clears_it(self, store, state):
        store.set_progress(state, 1, "in-progress", "drafting")
        store.set_progress(state, 1, "completed")
        assert state.progress[1].status is PhaseStatus.COMPLETED
        assert state.progress[1].note == ""

    def test_none_note_is_empty(self, store, state):
        store.set_progress(state, 2, "completed", None)
        assert state.progress[2].note == ""

    def test_other_phases_untouched(self, store, state):
        store.set_progress(state, 4, PhaseStatus.COMPLETED)
        assert all(
            state.progress[i].status is PhaseStatus.NOT_STARTED
            for i in range(9) if i != 4
        )

    def test_unknown_status_rejected(self, store, state):
        with pytest.raises(ValueError):
            store.set_progress(state, 1, "done")
        assert state.progress[1].status is PhaseStatus.NOT_STARTED


# ---------------------------------------------------------------------------
# Access log
# ---------------------------------------------------------------------------

class TestAccessLog:
    def test_append_in_order(self, store, state):
        for i in range(3):
            store.record_access(state, _entry(i))
        assert [e.phase_id for e in state.access_log.entries] == [0, 1, 2]

    def test_three_reads_count(self, store, state):
        for _ in range(3):
            store.record_access(state, _entry(5))
        assert state.access_log.count_for(5) == 3
        assert state.access_log.count_for(4) == 0

    def test_cap_keeps_most_recent(self, store, state):
        for i in range(ACCESS_LOG_MAX + 5):
            store.record_access(state, _entry(i % 9, uri=f"process://phase/{i % 9}#{i}"))
        store.record_access(state, _entry(0, uri="process://phase/0#last"))

        entries = state.access_log.entries
        assert len(entries) == ACCESS_LOG_MAX
        assert entries[-1].uri == "process://phase/0#last"
        assert entries[0].uri == f"process://phase/{6 % 9}#6"

    def test_custom_limit(self, tmp_path):
        small = StateStore(tmp_path / "s.json", log_limit=2)
        state = small.create_initial()
        for i in range(4):
            small.record_access(state, _entry(i))
        assert [e.phase_id for e in state.access_log.entries] == [2, 3]

    def test_section_is_optional(self):
        assert _entry(0).section is None
        assert _entry(0, section="frontmatter").section == "frontmatter"


# ---------------------------------------------------------------------------
# Persistence disabled
# ---------------------------------------------------------------------------

class TestPersistenceDisabled:
    def test_no_file_written(self, store, state):
        store.set_progress(state, 0, "completed")
        store.record_access(state, _entry(0))
        store.save(state)
        assert not store.state_path.exists()
        assert not store.state_path.parent.exists()

    def test_load_ignores_existing_file(self, tmp_path):
        path = tmp_path / "state.json"
        writer = StateStore(path, persist=True)
        saved = writer.create_initial()
        writer.set_progress(saved, 3, "completed")

        reader = StateStore(path, persist=False)
        assert reader.load().progress[3].status is PhaseStatus.NOT_STARTED


# ---------------------------------------------------------------------------
# Persistence enabled
# ---------------------------------------------------------------------------

class TestPersistence:
    def test_missing_file_gives_initial_state(self, persistent_store):
        state = persistent_store.load()
        assert state.progress[0].status is PhaseStatus.NOT_STARTED
        assert state.access_log.entries == []

    def test_round_trip(self, persistent_store):
        state = persistent_store.create_initial()
        persistent_store.set_progress(state, 2, "in-progress", "gathering")
        persistent_store.record_access(state, _entry(2, section="sources"))

        loaded = StateStore(persistent_store.state_path, persist=True).load()
        assert loaded.progress[2].status is PhaseStatus.IN_PROGRESS
        assert loaded.progress[2].note == "gathering"
        assert loaded.progress[2].updated_at == state.progress[2].updated_at
        assert len(loaded.access_log.entries) == 1
        assert loaded.access_log.entries[0].section == "sources"

    def test_writes_are_immediate(self, persistent_store):
        state = persistent_store.create_initial()
        persistent_store.set_progress(state, 7, "completed")
        with open(persistent_store.state_path, encoding="utf-8") as fh:
            assert json.load(fh)["progress"]["7"]["status"] == "completed"

    def test_document_uses_camel_case(self, persistent_store):
        state = persistent_store.create_initial()
        persistent_store.record_access(state, _entry(1))
        with open(persistent_store.state_path, encoding="utf-8") as fh:
            doc = json.load(fh)
        assert set(doc) == {"progress", "accessLog"}
        assert list(doc["progress"]) == [str(i) for i in range(9)]
        assert "updatedAt" in doc["progress"]["0"]
        logged = doc["accessLog"]["entries"][0]
        assert logged["phaseId"] == 1
        assert "section" not in logged

    def test_no_temp_files_left(self, persistent_store):
        state = persistent_store.create_initial()
        for i in range(5):
            persistent_store.record_access(state, _entry(i))
        leftovers = [n for n in os.listdir(persistent_store.state_path.parent) if n.endswith(".tmp")]
        assert leftovers == []

    def test_partial_progress_is_merged(self, persistent_store):
        path = persistent_store.state_path
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({
            "progress": {"3": {"status": "completed", "note": "done early",
                               "updatedAt": "2024-01-01T00:00:00+00:00"}},
        }), encoding="utf-8")

        state = persistent_store.load()
        assert state.progress[3].status is PhaseStatus.COMPLETED
        assert state.progress[3].note == "done early"
        assert sorted(state.progress) == list(range(9))
        assert state.progress[0].status is PhaseStatus.NOT_STARTED
        assert state.access_log.entries == []

    def test_unknown_phase_ids_dropped(self, persistent_store):
        path = persistent_store.state_path
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({
            "progress": {"42": {"status": "completed"}, "1": {"status": "in-progress"}},
            "accessLog": {"entries": []},
        }), encoding="utf-8")

        state = persistent_store.load()
        assert 42 not in state.progress
        assert state.progress[1].status is PhaseStatus.IN_PROGRESS

    def test_oversized_log_truncated_on_load(self, persistent_store):
        entries = [
            {"timestamp": "2024-01-01T00:00:00+00:00", "uri": f"u{i}", "phaseId": i % 9}
            for i in range(ACCESS_LOG_MAX + 50)
        ]
        path = persistent_store.state_path
        path.parent.mkdir(parents=True)
        path.write_text(json.dumps({"progress": {}, "accessLog": {"entries": entries}}),
                        encoding="utf-8")

        state = persistent_store.load()
        assert len(state.access_log.entries) == ACCESS_LOG_MAX
        assert state.access_log.entries[0].uri == "u50"
        assert state.access_log.entries[-1].uri == f"u{ACCESS_LOG_MAX + 49}"

    @pytest.mark.parametrize("content", [
        "{not json",
        "[1, 2, 3]",
        "\"just a string\"",
        json.dumps({"progress": {"0": {"status": "bogus"}}}),
        json.dumps({"accessLog": {"entries": [{"uri": "x"}]}}),
    ])
    def test_bad_file_gives_fresh_state(self, persistent_store, content):
        path = persistent_store.state_path
        path.parent.mkdir(parents=True)
        path.write_text(content, encoding="utf-8")

        state = persistent_store.load()
        assert all(e.status is PhaseStatus.NOT_STARTED for e in state.progress.values())
        assert state.access_log.entries == []

    def test_bad_file_is_replaced_on_next_save(self, persistent_store):
        path = persistent_store.state_path
        path.parent.mkdir(parents=True)
        path.write_text("{broken", encoding="utf-8")

        state = persistent_store.load()
        persistent_store.set_progress(state, 0, "in-progress")
        with open(path, encoding="utf-8") as fh:
            assert json.load(fh)["progress"]["0"]["status"] == "in-progress"

    def test_later_update_has_later_timestamp(self, persistent_store):
        state = persistent_store.create_initial()
        first = persistent_store.set_progress(state, 0, "in-progress")
        time.sleep(0.001)
        second = persistent_store.set_progress(state, 0, "completed")
        assert second.updated_at > first.updated_at


class TestModels:
    def test_access_entry_requires_uri(self):
        with pytest.raises(ValidationError):
            AccessLogEntry(phase_id=0)

    def test_entry_accepts_alias_and_field_name(self):
        a = AccessLogEntry(uri="x", phaseId=3)
        b = AccessLogEntry(uri="x", phase_id=3)
        assert a.phase_id == b.phase_id == 3
