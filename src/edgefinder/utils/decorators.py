import sys
from functools import wraps
from typing import Any, Callable

from .logger import setup_logging


def with_logging(func: Callable) -> Callable:
    """
    A decorator that sets up logging before running a CLI entry point.
    The level comes from a 'log_level=<LEVEL>' argument, defaulting to INFO.
    """

    @wraps(func)
    def wrapper(*args: Any, **kwargs: Any) -> Any:
        # Assumes the first argument is the argv list, falling back to sys.argv
        argv = args[0] if args and args[0] is not None else sys.argv[1:]
        level = "INFO"
        for arg in argv:
            if arg.startswith("log_level="):
                level = arg.split("=", 1)[1]
        setup_logging(level=level)
        return func(*args, **kwargs)

    return wrapper
