from abc import ABC, abstractmethod
from collections import deque
from datetime import datetime
from typing import List, Optional

from sqlalchemy import delete
from sqlmodel import Session, select

from ..config import settings
from ..domain.models import RelayAction
from ..infrastructure.database.connection import engine
from ..infrastructure.database.tables import ActionLogDBModel
from ..state.models import ActionLogEntry


# The Interface
class ActionLog(ABC):
    """
    Append-only record of relay transitions, shown in the history view.
    The ProgramEngine is the only writer while a program runs; readers may
    list entries at any time.
    """

    @abstractmethod
    def append(self, relay: int, state: bool, timestamp: datetime) -> ActionLogEntry:
        """Records that `relay` was switched to `state` at `timestamp`."""
        pass

    @abstractmethod
    def list_entries(self) -> List[ActionLogEntry]:
        """All retained entries, oldest first."""
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


def _to_action(state: bool) -> RelayAction:
    return RelayAction.ON if state else RelayAction.OFF


class InMemoryActionLog(ActionLog):
    """
    Keeps the newest `max_entries` transitions in memory.
    """

    def __init__(self, max_entries: int = settings.ACTION_LOG_MAX_ENTRIES):
        self._entries: deque = deque(maxlen=max_entries)

    def append(self, relay: int, state: bool, timestamp: datetime) -> ActionLogEntry:
        entry = ActionLogEntry(relay=relay, action=_to_action(state), timestamp=timestamp)
        self._entries.append(entry)
        return entry

    def list_entries(self) -> List[ActionLogEntry]:
        return list(self._entries)

    def clear(self) -> None:
        self._entries.clear()


class SqlActionLog(ActionLog):
    """
    Stores transitions in the 'action_logs' table, pruning everything but
    the newest `max_entries` rows on each append.
    """

    def __init__(self, db_engine=engine, max_entries: Optional[int] = settings.ACTION_LOG_MAX_ENTRIES):
        self.engine = db_engine
        self.max_entries = max_entries

    def append(self, relay: int, state: bool, timestamp: datetime) -> ActionLogEntry:
        entry = ActionLogEntry(relay=relay, action=_to_action(state), timestamp=timestamp)

        with Session(self.engine) as db:
            db.add(
                ActionLogDBModel(
                    entry_id=entry.id,
                    relay=entry.relay,
                    action=entry.action.value,
                    timestamp=entry.timestamp,
                )
            )
            db.commit()

            if self.max_entries:
                stale_ids = db.exec(
                    select(ActionLogDBModel.id)
                    .order_by(ActionLogDBModel.id.desc())
                    .offset(self.max_entries)
                ).all()
                if stale_ids:
                    db.exec(delete(ActionLogDBModel).where(ActionLogDBModel.id.in_(stale_ids)))
                    db.commit()

        return entry

    def list_entries(self) -> List[ActionLogEntry]:
        with Session(self.engine) as db:
            rows = db.exec(select(ActionLogDBModel).order_by(ActionLogDBModel.id)).all()
            return [
                ActionLogEntry(
                    id=row.entry_id,
                    relay=row.relay,
                    action=RelayAction(row.action),
                    timestamp=row.timestamp,
                )
                for row in rows
            ]

    def clear(self) -> None:
        with Session(self.engine) as db:
            db.exec(delete(ActionLogDBModel))
            db.commit()
