from dataclasses import dataclass


@dataclass(frozen=True)
class EntrySize:
    notional: float
    quantity: float
    accepted: bool


def compute_entry_size(balance: float,
                       price: float,
                       position_size_percent: float,
                       min_notional: float) -> EntrySize:
    """Size a new entry as a fixed share of the current balance.

    Entries whose notional falls below `min_notional` are rejected, never scaled up.
    """
    if price <= 0:
        return EntrySize(0.0, 0.0, False)
    notional = balance * (position_size_percent / 100)
    quantity = notional / price
    if notional < min_notional:
        return EntrySize(notional, quantity, False)
    return EntrySize(notional, quantity, True)
