from unittest.mock import patch

import pytest

from conftest import RecordingHooks
from pulsar_workshop.core import (AppState, CmdApp, ExitCode, InvalidParamError, ParamOutcome, ProgrammingError,
                                  WorkshopRuntimeError, get_log_file_base_name, parse_input_params, run_cmd_app)
from pulsar_workshop.core.settings import LOG_DIR_ENV


def make_app(hooks, *argv):
    return CmdApp.from_hooks("TestApp", list(argv), hooks)


def test_common_options_registered(hooks):
    app = make_app(hooks)

    assert [(spec.Short, spec.Long, spec.TakesValue, spec.Required) for spec in app.registry] == [
        ("h", "help", False, False),
        ("n", "numMsg", True, True),
        ("t", "topic", True, False),
        ("c", "connFile", True, True),
        ("a", "astra", False, False),
    ]
    assert hooks.calls == ["register"]
    assert app.state is AppState.CREATED


def test_help_short_circuits_execution(hooks, capsys):
    app = make_app(hooks, "-h", "-n", "1", "-c", "/tmp/c.conf")

    assert app.run() == ExitCode.HELP == 1
    assert "execute" not in hooks.calls
    assert hooks.calls.count("terminate") == 1
    assert "usage: TestApp" in capsys.readouterr().out
    assert app.state is AppState.TERMINATED


def test_missing_required_option(hooks, capsys):
    app = make_app(hooks, "-n", "10")

    assert app.run() == ExitCode.INVALID_PARAM == 2
    assert "execute" not in hooks.calls
    assert "terminate" in hooks.calls
    assert "Invalid input value(s) detected!" in capsys.readouterr().out


def test_invalid_message_count(hooks, conn_file):
    app = make_app(hooks, "-n", "0", "-c", str(conn_file))

    with pytest.raises(InvalidParamError, match="positive integer or -1") as exc_info:
        app.process_input_params()

    assert exc_info.value.option == "n"


@pytest.mark.parametrize("num_msg", ["0", "-2", "abc"])
def test_invalid_message_count_exit_code(hooks, conn_file, num_msg):
    app = make_app(hooks, "-n", num_msg, "-c", str(conn_file))

    assert app.run() == 2
    assert "execute" not in hooks.calls


def test_infinite_mode_marker(hooks, conn_file):
    app = make_app(hooks, "-n", "-1", "-c", str(conn_file), "-t", "demo")

    assert app.run() == ExitCode.OK
    assert hooks.calls == ["register", "validate", "execute", "terminate"]
    assert hooks.seen["num_msg"] == -1
    assert hooks.seen["topic_name"] == "demo"
    assert hooks.seen["conn_conf"].BrokerServiceUrl == "pulsar://localhost:6650"
    assert hooks.seen["use_astra_streaming"] is False


def test_astra_flag_reaches_connection_config(hooks, conn_file):
    app = make_app(hooks, "-n", "5", "-c", str(conn_file), "-a")

    assert app.run() == 0
    assert hooks.seen["use_astra_streaming"] is True
    assert hooks.seen["conn_conf"].UseAstraStreaming is True


def test_execute_failure_propagates(conn_file, capsys):
    hooks = RecordingHooks(execute_error=WorkshopRuntimeError("broker unavailable"))
    app = make_app(hooks, "-n", "1", "-c", str(conn_file))

    assert app.run() == ExitCode.RUNTIME == 3
    assert hooks.calls[-1] == "terminate"
    out = capsys.readouterr().out
    assert "Unexpected runtime error detected!" in out
    assert "broker unavailable" in out


def test_unexpected_exception_is_runtime_failure(conn_file):
    hooks = RecordingHooks(execute_error=KeyError("oops"))

    assert make_app(hooks, "-n", "1", "-c", str(conn_file)).run() == 3


def test_programming_error_is_runtime_failure(conn_file):
    hooks = RecordingHooks(execute_error=ProgrammingError("misuse"))

    assert make_app(hooks, "-n", "1", "-c", str(conn_file)).run() == 3


def test_missing_connection_file_is_invalid_param(hooks, tmp_path):
    app = make_app(hooks, "-n", "1", "-c", str(tmp_path / "missing.conf"))

    assert app.run() == 2
    assert "validate" not in hooks.calls


def test_loose_integer_coercion_of_extended_option(conn_file):
    hooks = RecordingHooks(extra_options=[("r", "retries", True, False)])
    app = make_app(hooks, "-n", "1", "-c", str(conn_file), "--retries=abc")

    assert app.process_input_params() is ParamOutcome.OK
    assert app.args.get_int("r", 3) == 3


def test_required_extended_option(conn_file):
    hooks = RecordingHooks(extra_options=[("dlt", "deadLetterTopic", True, True)])

    assert make_app(hooks, "-n", "1", "-c", str(conn_file)).run() == 2
    assert make_app(RecordingHooks(extra_options=[("dlt", "deadLetterTopic", True, True)]),
                    "-n", "1", "-c", str(conn_file), "-dlt", "dead").run() == 0


def test_parse_is_memoized(hooks, conn_file):
    app = make_app(hooks, "-n", "1", "-c", str(conn_file))

    with patch("pulsar_workshop.core.cmd_app.parse_input_params", wraps=parse_input_params) as parser:
        first = app.parse_input_params()
        second = app.parse_input_params()
        app.process_input_params()

    assert first is second
    assert parser.call_count == 1
    assert app.state is AppState.VALIDATED


def test_register_after_parse_is_rejected(hooks, conn_file):
    app = make_app(hooks, "-n", "1", "-c", str(conn_file))
    app.parse_input_params()

    with pytest.raises(ProgrammingError):
        app.add_optional_option("x", "extra", True, "too late")


def test_terminate_runs_once(hooks, conn_file):
    app = make_app(hooks, "-n", "1", "-c", str(conn_file))

    app.run()
    app.terminate()

    assert hooks.calls.count("terminate") == 1


def test_terminate_failure_keeps_exit_code(conn_file, caplog):
    hooks = RecordingHooks(terminate_error=RuntimeError("close failed"))
    app = make_app(hooks, "-n", "1", "-c", str(conn_file))

    assert app.run() == 0
    assert "Failed to terminate application" in caplog.text


def test_terminate_failure_after_execute_failure(conn_file):
    hooks = RecordingHooks(execute_error=WorkshopRuntimeError("broker unavailable"),
                           terminate_error=RuntimeError("close failed"))

    assert make_app(hooks, "-n", "1", "-c", str(conn_file)).run() == 3


def test_keyboard_interrupt_still_terminates(conn_file):
    hooks = RecordingHooks(execute_error=KeyboardInterrupt())
    app = make_app(hooks, "-n", "1", "-c", str(conn_file))

    with pytest.raises(KeyboardInterrupt):
        app.run()

    assert hooks.calls[-1] == "terminate"


def test_more_messages(hooks, conn_file):
    app = make_app(hooks, "-n", "2", "-c", str(conn_file))

    with pytest.raises(ProgrammingError):
        app.more_messages(0)

    app.process_input_params()
    assert app.more_messages(1)
    assert not app.more_messages(2)

    app.num_msg = -1
    assert app.more_messages(10 ** 9)


def test_run_cmd_app_reports_duplicate_registration(conn_file, capsys):
    hooks = RecordingHooks(extra_options=[("n", "numMsg", True, True)])

    assert run_cmd_app("TestApp", ["-n", "1", "-c", str(conn_file)], hooks) == 3
    assert "Unexpected runtime error detected!" in capsys.readouterr().out


def test_run_cmd_app_reports_unusable_log_dir(conn_file, tmp_path, monkeypatch, capsys):
    blocker = tmp_path / "blocker"
    blocker.write_text("not a directory", encoding="utf-8")
    monkeypatch.setenv(LOG_DIR_ENV, str(blocker / "logs"))
    hooks = RecordingHooks()

    assert run_cmd_app("TestApp", ["-n", "1", "-c", str(conn_file)], hooks, api_type="native-pulsar") == 3
    assert "Unexpected runtime error detected!" in capsys.readouterr().out
    assert hooks.calls == []
    assert get_log_file_base_name() is None
