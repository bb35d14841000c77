from prometheus_client import CollectorRegistry, Counter, Gauge

# Dedicated registry so repeated app construction in one process (tests) does not
# register the same collector names twice on the global default registry.
registry = CollectorRegistry()

iterations_counter = Counter("paper_bot_iterations_total", "Loop iterations that fetched candles", registry=registry)
closed_candles_counter = Counter("paper_bot_closed_candles_total", "Distinct closed candles evaluated", registry=registry)
entries_counter = Counter("paper_bot_entries_total", "Positions opened", ["side"], registry=registry)
exits_counter = Counter("paper_bot_exits_total", "Positions closed", ["exit_type"], registry=registry)
rejected_entries_counter = Counter("paper_bot_rejected_entries_total", "Entry signals dropped for insufficient balance", registry=registry)
iteration_errors_counter = Counter("paper_bot_iteration_errors_total", "Iterations aborted by an exception", registry=registry)
persistence_failures_counter = Counter("paper_bot_persistence_failures_total", "State saves that failed", registry=registry)
balance_gauge = Gauge("paper_bot_balance", "Virtual account balance", registry=registry)
