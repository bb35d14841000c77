"""Exception types shared across the trader."""


class ConfigurationError(RuntimeError):
    """Startup-time problem with the venue, symbol or data feed. Fatal."""


class SnapshotError(ValueError):
    """A persisted position/trade shape is missing required fields or has invalid values."""


__all__ = ["ConfigurationError", "SnapshotError"]
