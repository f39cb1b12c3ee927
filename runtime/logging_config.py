import logging
from typing import Optional

LOG_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


class IterationRecordFilter(logging.Filter):
    """Drop per-iteration progress records (those logged with an ``iteration`` extra)."""

    def filter(self, record: logging.LogRecord) -> bool:
        return not hasattr(record, "iteration")


class IterationFormatter(logging.Formatter):
    """Prefix per-iteration progress records with ``[iter N]``."""

    def format(self, record: logging.LogRecord) -> str:
        text = super().format(record)
        iteration = getattr(record, "iteration", None)
        if iteration is None:
            return text
        return f"[iter {iteration}] {text}"


def setup_logging(
    log_file: Optional[str],
    *,
    quiet: bool = False,
    debug: bool = False,
    progress: bool = False,
) -> logging.Logger:
    """Configure and return the shared `mesh_layout` logger.

    No file is written unless `log_file` is given. Per-iteration progress is
    logged at DEBUG level with an ``iteration`` extra: with `debug=True` the
    log file receives every iteration, while the console only shows them when
    `progress=True` as well, so long runs do not flood the terminal.
    """
    logger = logging.getLogger("mesh_layout")
    # pytest's caplog attaches to the root logger.
    logger.propagate = True

    level = logging.DEBUG if debug else logging.INFO
    logger.setLevel(level)

    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = IterationFormatter(LOG_FORMAT)

    if log_file:
        try:
            file_handler = logging.FileHandler(log_file, mode="w")
            file_handler.setLevel(level)
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
        except OSError as exc:
            print(f"[logging] Could not open log file '{log_file}': {exc}")

    if not quiet:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(level)
        console_handler.setFormatter(formatter)
        if not progress:
            console_handler.addFilter(IterationRecordFilter())
        logger.addHandler(console_handler)

    return logger
