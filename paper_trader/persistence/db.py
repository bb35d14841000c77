import logging
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, MetaData, String, Table, Text, create_engine, select

from paper_trader.persistence.state_store import StateStore

logger = logging.getLogger("database")

metadata = MetaData()

# One row per bot name; the snapshot column holds the same JSON document the file backend writes.
bot_state = Table(
    'bot_state', metadata,
    Column('name', String, primary_key=True),
    Column('snapshot', Text, nullable=False),
    Column('updated_at', DateTime(timezone=True)),
)


class SqlStateStore(StateStore):
    def __init__(self, url: str, initial_balance: float, name: str = "default"):
        super().__init__(initial_balance)
        self.url = url
        self.name = name
        self.engine = create_engine(url)
        metadata.create_all(self.engine)
        logger.info("State table ready at %s", self.describe())

    def describe(self) -> str:
        return f"{self.engine.url.render_as_string(hide_password=True)} [{self.name}]"

    def _read(self):
        query = select(bot_state.c.snapshot).where(bot_state.c.name == self.name)
        with self.engine.connect() as conn:
            row = conn.execute(query).fetchone()
        return row[0] if row else None

    def _write(self, payload: str) -> None:
        now = datetime.now(timezone.utc)
        with self.engine.begin() as conn:
            result = conn.execute(
                bot_state.update().where(bot_state.c.name == self.name).values(snapshot=payload, updated_at=now)
            )
            if result.rowcount == 0:
                conn.execute(bot_state.insert().values(name=self.name, snapshot=payload, updated_at=now))

    def dispose(self):
        self.engine.dispose()


__all__ = ["SqlStateStore", "bot_state", "metadata"]
