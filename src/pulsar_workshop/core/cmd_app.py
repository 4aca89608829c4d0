import logging
from enum import Enum
from pathlib import Path
from typing import Callable, Optional, Protocol, Sequence

from rich.console import Console
from rich.text import Text

from .arguments import ParsedArgs, parse_input_params
from .conn_conf import ClientConnConf, load_conn_conf
from .exceptions import ExitCode, InvalidParamError, ParamOutcome, ProgrammingError
from .log import configure_logging, get_log_file_name
from .options import OptionRegistry, OptionSpec
from .usage import render_usage

logger = logging.getLogger(__name__)

HELP_KEY = "h"
NUM_MSG_KEY = "n"
TOPIC_KEY = "t"
CONN_FILE_KEY = "c"
ASTRA_KEY = "a"

# Process indefinitely / all available messages.
INFINITE_NUM_MSG = -1

INVALID_PARAM_BANNER = "[ERROR] Invalid input value(s) detected!"
RUNTIME_BANNER = "[ERROR] Unexpected runtime error detected!"

Hook = Callable[["CmdApp"], None]


class AppState(Enum):
    CREATED = "created"
    PARSED = "parsed"
    VALIDATED = "validated"
    EXECUTING = "executing"
    TERMINATED = "terminated"


def report_failure(console: Console, banner: str):
    """Print an error banner followed by the exception being handled."""
    console.print()
    console.print(Text(banner, style="bold red"))
    console.print_exception()


class CmdAppHooks(Protocol):
    def register(self, app: "CmdApp") -> None: ...

    def validate(self, app: "CmdApp") -> None: ...

    def execute(self, app: "CmdApp") -> None: ...

    def terminate(self, app: "CmdApp") -> None: ...


class CmdApp:
    def __init__(self, app_name: str, input_params: Sequence[str],
                 register: Optional[Hook] = None,
                 validate: Optional[Hook] = None,
                 execute: Optional[Hook] = None,
                 terminate: Optional[Hook] = None,
                 console: Optional[Console] = None):
        self.app_name = app_name
        self.raw_input_params = list(input_params)
        self.console = console or Console(highlight=False)

        self._validate_hook = validate
        self._execute_hook = execute
        self._terminate_hook = terminate

        self.state = AppState.CREATED
        self.registry = OptionRegistry()
        self.args: Optional[ParsedArgs] = None

        self.num_msg: Optional[int] = None
        self.topic_name: Optional[str] = None
        self.conn_file: Optional[Path] = None
        self.use_astra_streaming = False
        self.conn_conf: Optional[ClientConnConf] = None

        self.add_optional_option(HELP_KEY, "help", False, "Displays the usage method.")
        self.add_required_option(NUM_MSG_KEY, "numMsg", True, "Number of messages to process.")
        self.add_optional_option(TOPIC_KEY, "topic", True, "Pulsar topic name.")
        self.add_required_option(CONN_FILE_KEY, "connFile", True, "\"client.conf\" file path.")
        self.add_optional_option(ASTRA_KEY, "astra", False, "Whether to use Astra streaming.")

        if register is not None:
            register(self)

    @classmethod
    def from_hooks(cls, app_name: str, input_params: Sequence[str], hooks: CmdAppHooks,
                   console: Optional[Console] = None) -> "CmdApp":
        return cls(app_name, input_params,
                   register=hooks.register,
                   validate=hooks.validate,
                   execute=hooks.execute,
                   terminate=hooks.terminate,
                   console=console)

    def add_required_option(self, short: str, long: str, takes_value: bool, description: str) -> OptionSpec:
        return self.registry.register_required(short, long, takes_value, description)

    def add_optional_option(self, short: str, long: str, takes_value: bool, description: str) -> OptionSpec:
        return self.registry.register_optional(short, long, takes_value, description)

    def parse_input_params(self) -> ParsedArgs:
        if self.args is None:
            self.registry.freeze()
            self.args = parse_input_params(self.app_name, self.registry, self.raw_input_params, help_key=HELP_KEY)
            self.state = AppState.PARSED

        return self.args

    def process_input_params(self) -> ParamOutcome:
        args = self.parse_input_params()

        if args.has(HELP_KEY):
            return ParamOutcome.HELP

        # (Required) number of messages
        self.num_msg = args.get_int(NUM_MSG_KEY)
        if self.num_msg <= 0 and self.num_msg != INFINITE_NUM_MSG:
            raise InvalidParamError("Message number must be a positive integer or -1 (all available raw input)!",
                                    option=NUM_MSG_KEY)

        # (Optional) topic
        self.topic_name = args.get_str(TOPIC_KEY)

        # (Required) client.conf file
        self.conn_file = args.get_file(CONN_FILE_KEY)

        # (Optional) hosted streaming flag, only on when present
        self.use_astra_streaming = args.get_bool(ASTRA_KEY, False)

        if self.conn_file is not None:
            self.conn_conf = load_conn_conf(self.conn_file, self.use_astra_streaming)

        if self._validate_hook is not None:
            self._validate_hook(self)

        self.state = AppState.VALIDATED

        return ParamOutcome.OK

    def more_messages(self, processed: int) -> bool:
        if self.num_msg is None:
            raise ProgrammingError("Message number is only known after the input parameters were validated")

        return self.num_msg == INFINITE_NUM_MSG or processed < self.num_msg

    def usage(self):
        render_usage(self.app_name, self.registry)

    def run(self) -> int:
        exit_code = ExitCode.OK

        try:
            outcome = self.process_input_params()

            if outcome is ParamOutcome.HELP:
                self.usage()
                exit_code = ExitCode.HELP
            else:
                self.state = AppState.EXECUTING
                if self._execute_hook is not None:
                    self._execute_hook(self)
        except InvalidParamError:
            report_failure(self.console, INVALID_PARAM_BANNER)
            exit_code = ExitCode.INVALID_PARAM
        except Exception:
            report_failure(self.console, RUNTIME_BANNER)
            exit_code = ExitCode.RUNTIME
        finally:
            self.terminate()

        return int(exit_code)

    def terminate(self):
        if self.state is AppState.TERMINATED:
            return

        self.state = AppState.TERMINATED

        if self._terminate_hook is None:
            return

        try:
            self._terminate_hook(self)
        except Exception:
            logger.exception(f"Failed to terminate application \"{self.app_name}\"")


def run_cmd_app(app_name: str, input_params: Sequence[str], hooks: CmdAppHooks,
                api_type: Optional[str] = None) -> int:
    """
    Run one demo invocation and return its exit code.

    :param app_name: Application name, also part of the log file name.
    :param input_params: Raw command line arguments, without the program name.
    :param hooks: The demo supplying register/validate/execute/terminate.
    :param api_type: Client style of the demo. When set, logging is configured before the app is built.
    :return:
    """
    try:
        if api_type is not None:
            configure_logging(get_log_file_name(api_type, app_name))

        app = CmdApp.from_hooks(app_name, input_params, hooks)
    except (OSError, ProgrammingError):
        report_failure(Console(highlight=False), RUNTIME_BANNER)
        return int(ExitCode.RUNTIME)

    return app.run()
