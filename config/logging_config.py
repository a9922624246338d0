"""Rich-handler logging preset, mirrored to a log file."""
import logging
from pathlib import Path
from rich.logging import RichHandler
from .app_config import settings

FILE_FORMAT = "%(asctime)s │ %(name)-38s │ %(levelname)-8s │ %(message)s"

def configure(log_file: str | None = settings.LOG_FILE, level: str = settings.LOG_LEVEL):
    handlers: list[logging.Handler] = [RichHandler(rich_tracebacks=True, markup=False)]
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(path, mode="a", encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(FILE_FORMAT))
        handlers.append(file_handler)

    logging.basicConfig(
        level=getattr(logging, level, logging.INFO),
        format="%(name)s │ %(message)s",
        datefmt="%H:%M:%S",
        handlers=handlers,
        force=True,
    )
