"""
Bot state persistence: load/save contract and the JSON file backend.
"""
import json
import logging
import os
import tempfile
from abc import ABC, abstractmethod

from paper_trader.errors import SnapshotError
from paper_trader.models.bot_state import BotState
from paper_trader.persistence.snapshot import snapshot_to_state, state_to_snapshot

logger = logging.getLogger("state_store")


class StateStore(ABC):
    """load() never raises; save() reports failure through its return value and the log."""

    def __init__(self, initial_balance: float):
        self.initial_balance = initial_balance

    def defaults(self) -> BotState:
        return BotState.fresh(self.initial_balance)

    def load(self) -> BotState:
        try:
            raw = self._read()
        except Exception as e:
            logger.warning("Error loading state from %s: %s; starting from defaults", self.describe(), e)
            return self.defaults()
        if raw is None:
            logger.info("No saved state at %s; starting from defaults", self.describe())
            return self.defaults()
        try:
            state = snapshot_to_state(json.loads(raw), self.initial_balance)
        except (ValueError, ArithmeticError, SnapshotError) as e:
            # json.JSONDecodeError is a ValueError
            logger.warning("Corrupt state snapshot in %s: %s; starting from defaults", self.describe(), e)
            return self.defaults()
        logger.info("Loaded state from %s", self.describe())
        return state

    def save(self, state: BotState) -> bool:
        try:
            payload = json.dumps(state_to_snapshot(state), indent=2)
            self._write(payload)
            return True
        except Exception as e:
            logger.error("Error saving state to %s: %s", self.describe(), e)
            return False

    @abstractmethod
    def _read(self):
        """Return the raw snapshot text, or None if nothing was saved yet."""

    @abstractmethod
    def _write(self, payload: str) -> None:
        ...

    @abstractmethod
    def describe(self) -> str:
        ...


class JsonFileStateStore(StateStore):
    def __init__(self, path: str, initial_balance: float):
        super().__init__(initial_balance)
        self.path = path

    def describe(self) -> str:
        return self.path

    def _read(self):
        if not os.path.exists(self.path):
            return None
        with open(self.path, "r", encoding="utf-8") as f:
            return f.read()

    def _write(self, payload: str) -> None:
        directory = os.path.dirname(os.path.abspath(self.path))
        os.makedirs(directory, exist_ok=True)
        fd, tmp = tempfile.mkstemp(dir=directory, prefix=".state-", suffix=".tmp")
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(tmp, self.path)
        except BaseException:
            if os.path.exists(tmp):
                os.remove(tmp)
            raise


def build_state_store(settings) -> StateStore:
    if settings.STATE_BACKEND == "database":
        from paper_trader.persistence.db import SqlStateStore
        return SqlStateStore(settings.DATABASE_URL, settings.INITIAL_BALANCE)
    return JsonFileStateStore(settings.STATE_FILE, settings.INITIAL_BALANCE)


__all__ = ["StateStore", "JsonFileStateStore", "build_state_store"]
