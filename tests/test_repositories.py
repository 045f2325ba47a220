"""
Tests for program storage and the action log, in memory and on SQLite.

Run with: pytest -q
"""
from datetime import datetime, timedelta, timezone

import pytest

from relay_sequencer.data.example_programs import EXAMPLE_PROGRAMS
from relay_sequencer.domain.models import RelayAction
from relay_sequencer.repositories.action_log import InMemoryActionLog, SqlActionLog
from relay_sequencer.repositories.program import (
    InMemoryProgramRepository,
    SqlProgramRepository,
    StaticProgramRepository,
)
from relay_sequencer.services.exceptions import ProgramNotFoundError

from factories import loop, make_program, random_wait, relay, wait

START = datetime(2024, 5, 1, 6, 0, tzinfo=timezone.utc)


@pytest.fixture(params=["memory", "sql"])
def program_repo(request, db_engine):
    if request.param == "memory":
        return InMemoryProgramRepository()
    return SqlProgramRepository(db_engine)


@pytest.fixture(params=["memory", "sql"])
def make_log(request, db_engine):
    def factory(max_entries=100):
        if request.param == "memory":
            return InMemoryActionLog(max_entries)
        return SqlActionLog(db_engine, max_entries)

    return factory


def nested_program(program_id="nested", name="Nested"):
    return make_program(
        relay(0, "ON", step_id="a"),
        loop(2, random_wait(3, 8), loop(3, relay(1, "ON", step_id="b"), wait(1, step_id="c"))),
        program_id=program_id,
        name=name,
    )


class TestProgramRepository:

    def test_save_and_get_round_trips_nested_steps(self, program_repo):
        program = nested_program()

        program_repo.save_program(program)

        assert program_repo.get_program("nested") == program

    def test_missing_program_raises(self, program_repo):
        with pytest.raises(ProgramNotFoundError) as exc_info:
            program_repo.get_program("nope")
        assert exc_info.value.program_id == "nope"

    def test_save_replaces_existing_program(self, program_repo):
        program_repo.save_program(nested_program(name="First"))
        program_repo.save_program(make_program(relay(3, "OFF"), program_id="nested", name="Second"))

        stored = program_repo.get_program("nested")
        assert stored.name == "Second"
        assert len(stored.steps) == 1
        assert len(program_repo.list_programs()) == 1

    def test_list_programs(self, program_repo):
        program_repo.save_program(nested_program("one"))
        program_repo.save_program(nested_program("two"))

        assert sorted(p.id for p in program_repo.list_programs()) == ["one", "two"]

    def test_delete_program(self, program_repo):
        program_repo.save_program(nested_program())

        assert program_repo.delete_program("nested") is True
        assert program_repo.delete_program("nested") is False
        assert program_repo.list_programs() == []

    def test_static_repository_holds_examples(self):
        repo = StaticProgramRepository()

        assert [p.id for p in repo.list_programs()] == list(EXAMPLE_PROGRAMS)
        assert repo.get_program("zone_rotation").enabled is False


class TestActionLog:

    def test_entries_are_kept_in_order(self, make_log):
        log = make_log()
        log.append(0, True, START)
        log.append(1, True, START + timedelta(seconds=1))
        log.append(0, False, START + timedelta(seconds=2))

        entries = log.list_entries()
        assert [(e.relay, e.action) for e in entries] == [
            (0, RelayAction.ON),
            (1, RelayAction.ON),
            (0, RelayAction.OFF),
        ]
        assert [e.timestamp for e in entries] == [
            START,
            START + timedelta(seconds=1),
            START + timedelta(seconds=2),
        ]

    def test_append_returns_stored_entry(self, make_log):
        log = make_log()
        entry = log.append(2, True, START)

        assert log.list_entries()[0].id == entry.id

    def test_only_newest_entries_are_retained(self, make_log):
        log = make_log(max_entries=3)
        for second in range(5):
            log.append(second % 4, True, START + timedelta(seconds=second))

        assert [e.relay for e in log.list_entries()] == [2, 3, 0]

    def test_clear(self, make_log):
        log = make_log()
        log.append(0, True, START)

        log.clear()

        assert log.list_entries() == []

    def test_naive_timestamp_is_stored_as_utc(self, make_log):
        log = make_log()
        log.append(1, False, START.replace(tzinfo=None))

        entry = log.list_entries()[0]
        assert entry.timestamp == START
        assert entry.timestamp.tzinfo is not None
