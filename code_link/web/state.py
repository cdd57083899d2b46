"""In-memory state for the HTTP API, no database required."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path

from code_link.graph import CollectionStats, Module, ModuleCollection


@dataclass
class LinkSession:
    collection: ModuleCollection
    order: list[list[Module]]
    stats: CollectionStats
    id: str = field(default_factory=lambda: uuid.uuid4().hex[:12])
    source_dir: str = ""
    timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class AppState:
    """Singleton in-memory state shared by all API routes."""

    def __init__(self):
        self.links: dict[str, LinkSession] = {}
        # Paths outside this directory are refused.
        self.allowed_root: Path = Path.home()

    def add_link(self, session: LinkSession) -> None:
        self.links[session.id] = session

    def get_link(self, link_id: str) -> LinkSession | None:
        return self.links.get(link_id)

    def delete_link(self, link_id: str) -> bool:
        return self.links.pop(link_id, None) is not None


# Module-level singleton shared by all routers
state = AppState()
