import logging
import sys

LOGGER_NAME = "edgefinder"


def setup_logging(level: str = "INFO") -> None:
    """Configure the root logger for the application."""

    log_format = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    log_level = getattr(logging, level.upper(), logging.INFO)

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(log_format))

    logging.basicConfig(level=log_level, handlers=[handler], force=True)


def get_logger() -> logging.Logger:
    return logging.getLogger(LOGGER_NAME)


def log_info(msg: str) -> None:
    get_logger().info(msg)


def log_warning(msg: str) -> None:
    get_logger().warning(f"WARNING: {msg}")


def log_error(msg: str) -> None:
    get_logger().error(f"ERROR: {msg}")


def log_success(msg: str) -> None:
    get_logger().info(f"[SUCCESS] {msg}")
