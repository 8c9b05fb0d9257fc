import logging
import sys

_HANDLER_NAME = "spend_invest.stdout"


def setup_logging(level: str | int = logging.INFO) -> None:
    """Configure logging to output to stdout with proper formatting."""
    root_logger = logging.getLogger()
    if not any(h.get_name() == _HANDLER_NAME for h in root_logger.handlers):
        handler = logging.StreamHandler(sys.stdout)
        handler.set_name(_HANDLER_NAME)
        formatter = logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )
        handler.setFormatter(formatter)
        root_logger.addHandler(handler)
    root_logger.setLevel(level)

    # Set lower log levels for some noisy libraries
    logging.getLogger("pandas").setLevel(logging.WARNING)
