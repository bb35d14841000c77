from pydantic import Field, field_validator, model_validator
from pydantic_settings import BaseSettings

STATE_BACKENDS = ("file", "database")


class Settings(BaseSettings):
    """Immutable runtime configuration.

    Every field can be overridden by an environment variable of the same name
    (or a `.env` file). Built once by the entry point and handed to each
    component; nothing reads it from module state.
    """

    # Exchange / market
    EXCHANGE: str = Field("kucoin")
    SYMBOL: str = Field("BTC/USDT")
    TIMEFRAME: str = Field("1m")
    VERBOSE: bool = Field(True)

    # Indicators / signal filter
    FAST_LEN: int = Field(12, gt=0)
    SLOW_LEN: int = Field(30, gt=0)
    RSI_LEN: int = Field(14, gt=0)
    RSI_LONG_MIN: float = Field(55.0, ge=0, le=100)
    RSI_SHORT_MAX: float = Field(45.0, ge=0, le=100)
    MIN_BARS: int = Field(200, gt=0)
    FETCH_LIMIT_FLOOR: int = Field(500, gt=0)

    # Loop timing
    POLL_MS: int = Field(5000, gt=0)
    HEARTBEAT_MINUTES: float = Field(5, gt=0)
    ERROR_BACKOFF_MS: int = Field(2000, gt=0)
    ERROR_BACKOFF_MAX_MS: int = Field(60000, gt=0)
    ERROR_BACKOFF_MULTIPLIER: float = Field(1.0, ge=1.0)  # 1.0 keeps a fixed delay

    # Risk management
    STOP_LOSS_PERCENT: float = Field(2.0, ge=0, lt=100)
    TAKE_PROFIT_PERCENT: float = Field(4.0, ge=0, lt=100)
    TRADING_FEE_PERCENT: float = Field(0.16, ge=0)  # round trip (0.08% * 2)

    # Virtual account
    INITIAL_BALANCE: float = Field(100.0, ge=0)
    POSITION_SIZE_PERCENT: float = Field(95.0, gt=0, le=100)
    MIN_TRADE_NOTIONAL: float = Field(5.0, ge=0)

    # Persistence / reporting
    STATE_BACKEND: str = Field("file")
    STATE_FILE: str = Field("state1.json")
    DATABASE_URL: str = Field("sqlite:///paper_trader.db")
    EXPORT_FILE: str = Field("trading_log.csv")

    # Logging / notifications
    LOG_PREFIX: str = Field("[PAPER-BOT]")
    LOG_LEVEL: str = Field("INFO")
    DISPLAY_TIMEZONE: str = Field("Europe/Madrid")
    NOTIFIER_WEBHOOK: str = Field("")

    # Application
    APP_PORT: int = Field(8000, gt=0)
    API_ENABLED: bool = Field(True)

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
        "frozen": True,
    }

    @field_validator("STATE_BACKEND")
    @classmethod
    def _check_backend(cls, v: str) -> str:
        v = v.lower()
        if v not in STATE_BACKENDS:
            raise ValueError(f"STATE_BACKEND must be one of {STATE_BACKENDS}, got {v!r}")
        return v

    @model_validator(mode="after")
    def _check_periods(self):
        if self.FAST_LEN >= self.SLOW_LEN:
            raise ValueError("FAST_LEN must be smaller than SLOW_LEN")
        if self.MIN_BARS <= max(self.SLOW_LEN, self.RSI_LEN):
            raise ValueError("MIN_BARS must exceed both SLOW_LEN and RSI_LEN")
        if self.ERROR_BACKOFF_MAX_MS < self.ERROR_BACKOFF_MS:
            raise ValueError("ERROR_BACKOFF_MAX_MS must be >= ERROR_BACKOFF_MS")
        return self

    @property
    def fetch_limit(self) -> int:
        return max(self.MIN_BARS + 5, self.FETCH_LIMIT_FLOOR)

    @property
    def poll_seconds(self) -> float:
        return self.POLL_MS / 1000.0

    @property
    def heartbeat_seconds(self) -> float:
        return self.HEARTBEAT_MINUTES * 60.0


def load_settings(**overrides) -> Settings:
    """Build the settings value once (environment + .env + explicit overrides)."""
    return Settings(**overrides)


__all__ = ["Settings", "load_settings", "STATE_BACKENDS"]
