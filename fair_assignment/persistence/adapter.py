# fair_assignment/persistence/adapter.py
from __future__ import annotations

import json

from ..models import WorkingState
from ..config import STORAGE_KEY
from ..logger import logger
from .store import KeyValueStore


def dump_state(state: WorkingState) -> str:
    return json.dumps(state.to_dict(), ensure_ascii=False)


def parse_state(text: str) -> WorkingState:
    raw = json.loads(text)
    if not isinstance(raw, dict):
        raise ValueError("Stored state is not a JSON object.")
    return WorkingState.from_dict(raw)


class PersistenceAdapter:
    """Reads and writes the whole WorkingState under one fixed key."""

    def __init__(self, store: KeyValueStore, key: str = STORAGE_KEY):
        self.store = store
        self.key = key

    def save(self, state: WorkingState) -> None:
        # Best effort: a failed write must not break the command that triggered it.
        try:
            self.store.put(self.key, dump_state(state))
        except OSError as e:
            logger.error("Could not save state under %r: %s", self.key, e)

    def load(self) -> WorkingState:
        try:
            text = self.store.get(self.key)
        except (OSError, ValueError) as e:
            logger.warning("Could not read stored state, starting empty: %s", e)
            return WorkingState()

        if text is None:
            return WorkingState()

        try:
            return parse_state(text)
        except (ValueError, KeyError, TypeError, AttributeError) as e:
            logger.warning("Stored state is malformed, starting empty: %s", e)
            return WorkingState()

    def reset(self) -> WorkingState:
        state = WorkingState()
        self.save(state)
        return state
