from dataclasses import dataclass, field
from enum import Enum

from clonegraph import NO_CLONE, Staged, clone


class TaskStatus(Enum):
    PENDING = "pending"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


@dataclass
class Task:
    description: str
    status: TaskStatus
    board: "Board | None" = None


@dataclass
class Board:
    """Tasks point back at their board, so the graph is cyclic."""

    name: str
    tasks: list[Task] = field(default_factory=list)

    def add(self, description: str) -> Task:
        task = Task(description, TaskStatus.PENDING, board=self)
        self.tasks.append(task)
        return task


class AuditLog:
    """Shared sink that every copy of a board should keep writing to."""

    def __init__(self) -> None:
        self.lines: list[str] = []


def archive_stages(board: Board, clone_nested):
    """Staged strategy: archived copies get a prefixed name."""
    copy = Board(f"archive/{board.name}")
    yield copy
    copy.tasks = clone_nested(board.tasks)


def main() -> None:
    board = Board("sprint-1")
    for description in ("Collect data", "Analyze data", "Generate report"):
        board.add(description)

    snapshot = clone(board)
    board.tasks[0].status = TaskStatus.COMPLETED

    print(f"Live board:  {[t.status.value for t in board.tasks]}")
    print(f"Snapshot:    {[t.status.value for t in snapshot.tasks]}")
    print(f"Back-links intact: {all(t.board is snapshot for t in snapshot.tasks)}")

    log = AuditLog()
    session = {"board": board, "log": log}
    copied = clone(session, {AuditLog: NO_CLONE})
    print(f"Audit log shared: {copied['log'] is log}")

    archived = clone(board, {Board: Staged(archive_stages)})
    print(f"Archived as {archived.name}; tasks point at it: {archived.tasks[0].board is archived}")


if __name__ == "__main__":
    main()
