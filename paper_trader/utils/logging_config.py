import logging
import sys

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def configure_logging(level: str = "INFO"):
    """Configure logging for the application."""
    root = logging.getLogger()
    # Avoid stacking handlers when the app is started more than once in a process
    for h in list(root.handlers):
        if getattr(h, "_paper_trader", False):
            root.removeHandler(h)
    handler = logging.StreamHandler(sys.stdout)
    handler._paper_trader = True
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(getattr(logging, str(level).upper(), logging.INFO))

# Make sure the function is available for import
__all__ = ['configure_logging', 'LOG_FORMAT']
