import pytest

from paper_trader.config import Settings
from paper_trader.services.backoff import BackoffPolicy


def test_fixed_delay():
    policy = BackoffPolicy(2.0, 60.0)
    assert [policy.next_delay() for _ in range(4)] == [2.0, 2.0, 2.0, 2.0]


def test_exponential_delay_is_capped():
    policy = BackoffPolicy(1.0, 10.0, multiplier=2.0)
    delays = [policy.next_delay() for _ in range(200)]
    assert delays[:5] == [1.0, 2.0, 4.0, 8.0, 10.0]
    assert max(delays) == 10.0
    assert policy.failures == 200


def test_reset_restarts_schedule():
    policy = BackoffPolicy(1.0, 10.0, multiplier=3.0)
    policy.next_delay()
    policy.next_delay()
    policy.reset()
    assert policy.next_delay() == 1.0


def test_from_settings_converts_milliseconds():
    policy = BackoffPolicy.from_settings(Settings(ERROR_BACKOFF_MS=500, ERROR_BACKOFF_MAX_MS=4000,
                                                  ERROR_BACKOFF_MULTIPLIER=2.0))
    assert (policy.base_seconds, policy.max_seconds, policy.multiplier) == (0.5, 4.0, 2.0)


@pytest.mark.parametrize("args", [(0, 1), (5, 1), (1, 5, 0.5)])
def test_invalid_policy(args):
    with pytest.raises(ValueError):
        BackoffPolicy(*args)
