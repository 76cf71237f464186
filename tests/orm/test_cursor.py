"""Tests for rowlink.orm.cursor."""

from rowlink.orm.cursor import CursorState, LazyCursor


class FakeResult:
    def __init__(self, rows):
        self._rows = list(rows)

    def fetchone(self):
        return self._rows.pop(0) if self._rows else None

    def fetchall(self):
        rows, self._rows = self._rows, []
        return rows


class Executor:
    def __init__(self, rows):
        self.rows = rows
        self.calls = 0

    def __call__(self):
        self.calls += 1
        return FakeResult(self.rows)


ROWS = [{"id": 10, "name": "Ann"}, {"id": 20, "name": "Bo"}]


class TestLazyCursor:
    def test_nothing_runs_before_rewind(self):
        execute = Executor(ROWS)
        cursor = LazyCursor(execute)
        assert cursor.state is CursorState.UNEXECUTED
        assert not cursor.executed
        assert cursor.position == -1
        assert execute.calls == 0

    def test_walks_rows_and_records_ids(self):
        cursor = LazyCursor(Executor(ROWS))
        cursor.rewind()
        assert cursor.position == 0
        assert cursor.row == {"id": 10, "name": "Ann"}
        cursor.advance()
        assert cursor.position == 1
        assert cursor.row["name"] == "Bo"
        cursor.advance()
        assert cursor.state is CursorState.EXHAUSTED
        assert not cursor.has_current
        assert cursor.ids == {0: 10, 1: 20}

    def test_rewind_mid_pass_keeps_result(self):
        execute = Executor(ROWS)
        cursor = LazyCursor(execute)
        cursor.rewind()
        cursor.rewind()
        assert execute.calls == 1
        assert cursor.position == 0
        # position resets but the open result keeps reading forward
        assert cursor.row["id"] == 20

    def test_rewind_after_exhaustion_reexecutes(self):
        execute = Executor(ROWS)
        cursor = LazyCursor(execute)
        cursor.rewind()
        cursor.advance()
        cursor.advance()
        cursor.rewind()
        assert execute.calls == 2
        assert cursor.row["id"] == 10

    def test_empty_result(self):
        cursor = LazyCursor(Executor([]))
        cursor.rewind()
        assert cursor.state is CursorState.EXHAUSTED
        assert cursor.row is None
        assert cursor.position == 0

    def test_reset(self):
        execute = Executor(ROWS)
        cursor = LazyCursor(execute)
        cursor.rewind()
        cursor.reset()
        assert cursor.state is CursorState.UNEXECUTED
        assert cursor.position == -1
        cursor.rewind()
        assert execute.calls == 2
        assert cursor.row["id"] == 10
