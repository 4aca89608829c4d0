import logging
from pathlib import Path
from typing import Optional, Union

from rich.console import Console
from rich.logging import RichHandler

from .settings import LogSettings

ROOT_LOGGER_NAME = "pulsar_workshop"
FILE_LOG_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-8s %(name)s %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_log_file_base_name: Optional[str] = None


def get_log_file_name(api_type: str, app_name: str) -> str:
    return f"{api_type}-{app_name}"


def get_log_file_base_name() -> Optional[str]:
    return _log_file_base_name


def configure_logging(log_file_base_name: str, log_dir: Union[str, Path, None] = None,
                      level: Optional[str] = None) -> logging.Logger:
    """
    One-shot logging setup for a demo process.

    Records the process-wide log file base name and attaches a console handler plus a
    file handler writing "<log_dir>/<log_file_base_name>.log". Calls after the first are no-ops.

    :param log_file_base_name: Usually built with get_log_file_name().
    :param log_dir: Directory of the log file, defaults to LogSettings.LogDir.
    :param level: Logging level name, defaults to LogSettings.Level.
    :return: The package root logger.
    """
    global _log_file_base_name

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    if _log_file_base_name is not None:
        return root_logger

    settings = LogSettings.from_env()
    log_path = Path(log_dir if log_dir is not None else settings.LogDir)
    log_path.mkdir(parents=True, exist_ok=True)

    file_handler = logging.FileHandler(log_path / f"{log_file_base_name}.log", encoding="utf-8")
    file_handler.setFormatter(logging.Formatter(fmt=FILE_LOG_FORMAT, datefmt=FILE_DATE_FORMAT))

    root_logger.setLevel((level or settings.Level).upper())

    console_handler = RichHandler(console=Console(stderr=True), show_path=False, rich_tracebacks=True)
    console_handler.setFormatter(logging.Formatter("%(message)s"))
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)

    _log_file_base_name = log_file_base_name

    return root_logger


def reset_logging():
    global _log_file_base_name

    root_logger = logging.getLogger(ROOT_LOGGER_NAME)
    for handler in list(root_logger.handlers):
        root_logger.removeHandler(handler)
        handler.close()

    _log_file_base_name = None
