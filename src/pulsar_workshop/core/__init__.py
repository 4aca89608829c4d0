from .arguments import ParsedArgs, parse_input_params
from .clients import (NATIVE_PULSAR_API_TYPE, S4K_API_TYPE, create_kafka_consumer, create_pulsar_client,
                      kafka_base_config)
from .cmd_app import INFINITE_NUM_MSG, AppState, CmdApp, CmdAppHooks, run_cmd_app
from .conn_conf import ClientConnConf, load_conn_conf
from .exceptions import (ExitCode, InvalidParamError, ParamOutcome, ProgrammingError, WorkshopError,
                         WorkshopRuntimeError)
from .log import configure_logging, get_log_file_base_name, get_log_file_name
from .options import OptionRegistry, OptionSpec
from .settings import LogSettings
from .usage import render_usage
