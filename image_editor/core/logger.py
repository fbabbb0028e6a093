import logging
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s – %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


def configure_logging(log_dir: Path | None = None, *, verbose: bool = False) -> Path:
    """
    Configure application-wide logging: full DEBUG log in a file, INFO (or
    DEBUG with ``verbose``) on stdout. Pillow is kept at INFO.
    Returns the log file path.
    """
    log_dir = log_dir or Path.home() / ".image_editor"
    log_dir.mkdir(parents=True, exist_ok=True)
    log_path = log_dir / "app.log"

    formatter = logging.Formatter(LOG_FORMAT, DATE_FORMAT)

    file_handler = logging.FileHandler(log_path, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(formatter)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(formatter)

    logging.basicConfig(level=logging.DEBUG, handlers=[file_handler, console_handler], force=True)
    logging.getLogger("PIL").setLevel(logging.INFO)
    return log_path
