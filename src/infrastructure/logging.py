import sys
import logging
from dataclasses import dataclass
from pathlib import Path

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


@dataclass(eq=False)
class TruncatingFileHandler(logging.FileHandler):
    filename: Path
    max_bytes: int
    mode: str = "a"
    encoding: str | None = None
    delay: bool = False

    def __post_init__(self) -> None:
        self.filename.parent.mkdir(parents=True, exist_ok=True)
        super().__init__(
            filename=self.filename,
            mode=self.mode,
            encoding=self.encoding,
            delay=self.delay,
        )

    def emit(self, record: logging.LogRecord) -> None:
        try:
            if self.stream and self.stream.tell() >= self.max_bytes:
                self.stream.seek(0)
                self.stream.truncate()
            super().emit(record)
        except Exception:
            self.handleError(record)


def create_logger(
    *,
    name: str,
    log_dir: Path | None = None,
    logfile_size_limit_mb: int = 10,
    level: int | str = logging.INFO,
) -> logging.Logger:
    """Logger writing to stderr, and to `<log_dir>/worker.log` when a dir is given."""
    logger = logging.getLogger(name)
    logger.setLevel(level)
    logger.propagate = False

    if logger.handlers:
        return logger  # singleton safety

    formatter = logging.Formatter(LOG_FORMAT)

    stream_handler = logging.StreamHandler(sys.stderr)
    stream_handler.setFormatter(formatter)
    logger.addHandler(stream_handler)

    if log_dir is not None:
        file_handler = TruncatingFileHandler(
            filename=log_dir / "worker.log",
            max_bytes=logfile_size_limit_mb * 1024 * 1024,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    return logger
