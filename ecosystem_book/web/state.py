"""In-memory state for the query API; nothing is persisted between runs."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime

from ecosystem_book.analysis import ClosureResult, Index


@dataclass
class IndexSession:
    index: Index
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    index_dir: str = ""
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


@dataclass
class ClosureSession:
    index_id: str
    result: ClosureResult
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class AppState:
    """Singleton in-memory state shared by all API routes."""

    def __init__(self):
        self.indexes: dict[str, IndexSession] = {}
        self.closures: dict[str, ClosureSession] = {}

    def add_index(self, session: IndexSession) -> None:
        self.indexes[session.id] = session

    def get_index(self, index_id: str) -> IndexSession | None:
        return self.indexes.get(index_id)

    def add_closure(self, session: ClosureSession) -> None:
        self.closures[session.id] = session

    def get_closure(self, closure_id: str) -> ClosureSession | None:
        return self.closures.get(closure_id)

    def delete_index(self, index_id: str) -> bool:
        """Remove an index and every closure computed from it."""
        if self.indexes.pop(index_id, None) is None:
            return False
        expired = [cid for cid, c in self.closures.items() if c.index_id == index_id]
        for cid in expired:
            del self.closures[cid]
        return True


# Module-level singleton, imported by all routers
state = AppState()
