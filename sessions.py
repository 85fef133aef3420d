# sessions.py
"""In-memory conversation sessions keyed by a browser cookie token.

Nothing is persisted: sessions live until they are reset or the process
restarts.
"""
import json
import secrets
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from prompts import system_line


@dataclass
class Session:
    transcript: List[str] = field(default_factory=list)
    last_description: Optional[str] = None


class SessionStore:
    def __init__(self) -> None:
        self._sessions: Dict[str, Session] = {}

    def __len__(self) -> int:
        return len(self._sessions)

    @staticmethod
    def new_token() -> str:
        return secrets.token_urlsafe(24)

    def get(self, token: Optional[str]) -> Optional[Session]:
        if not token:
            return None
        return self._sessions.get(token)

    def start(self, token: str, part_name: str, description: Any) -> Session:
        """(Re)initialise the session around a freshly generated description."""
        if not isinstance(description, str):
            description = json.dumps(description)
        session = Session(transcript=[system_line(part_name, description)], last_description=description)
        self._sessions[token] = session
        return session

    def delete(self, token: Optional[str]) -> None:
        if token:
            self._sessions.pop(token, None)
