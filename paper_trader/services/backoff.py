class BackoffPolicy:
    """Delay schedule applied after a failed loop iteration.

    multiplier == 1.0 gives a fixed delay; > 1.0 grows the delay
    exponentially up to max_seconds. The loop retries forever, so the cap is
    what bounds time spent between attempts.
    """

    def __init__(self, base_seconds: float, max_seconds: float, multiplier: float = 1.0):
        if base_seconds <= 0 or max_seconds < base_seconds:
            raise ValueError("need 0 < base_seconds <= max_seconds")
        if multiplier < 1.0:
            raise ValueError("multiplier must be >= 1.0")
        self.base_seconds = base_seconds
        self.max_seconds = max_seconds
        self.multiplier = multiplier
        self.failures = 0

    @classmethod
    def from_settings(cls, settings) -> "BackoffPolicy":
        return cls(settings.ERROR_BACKOFF_MS / 1000.0,
                   settings.ERROR_BACKOFF_MAX_MS / 1000.0,
                   settings.ERROR_BACKOFF_MULTIPLIER)

    def next_delay(self) -> float:
        # exponent is clamped so a long outage cannot overflow the float
        exponent = min(self.failures, 64)
        delay = min(self.base_seconds * (self.multiplier ** exponent), self.max_seconds)
        self.failures += 1
        return delay

    def reset(self):
        self.failures = 0
