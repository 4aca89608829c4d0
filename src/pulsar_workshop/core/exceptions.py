from enum import Enum, IntEnum
from typing import Optional


class ExitCode(IntEnum):
    OK = 0
    HELP = 1
    INVALID_PARAM = 2
    RUNTIME = 3


class ParamOutcome(Enum):
    OK = "ok"
    HELP = "help"


class WorkshopError(Exception):
    pass


class InvalidParamError(WorkshopError):
    def __init__(self, message: str, option: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.option = option


class WorkshopRuntimeError(WorkshopError):
    pass


class ProgrammingError(WorkshopError):
    """Misuse of the harness itself, e.g. registering the same option twice."""
