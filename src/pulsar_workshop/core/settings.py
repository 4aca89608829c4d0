import os
from typing import Mapping, Optional

from pydantic import BaseModel

LOG_DIR_ENV = "PULSAR_WORKSHOP_LOG_DIR"
LOG_LEVEL_ENV = "PULSAR_WORKSHOP_LOG_LEVEL"


class LogSettings(BaseModel):
    LogDir: str = "logs"
    Level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "LogSettings":
        environ = os.environ if environ is None else environ

        values = {}
        if environ.get(LOG_DIR_ENV):
            values["LogDir"] = environ[LOG_DIR_ENV]
        if environ.get(LOG_LEVEL_ENV):
            values["Level"] = environ[LOG_LEVEL_ENV].upper()

        return cls(**values)
