from pathlib import Path

import pytest

from pulsar_workshop.core.log import reset_logging
from pulsar_workshop.core.settings import LOG_DIR_ENV

CONN_CONF_TEXT = """\
# Pulsar client connection settings
brokerServiceUrl = pulsar://localhost:6650
webServiceUrl=http://localhost:8080

authPlugin = org.apache.pulsar.client.impl.auth.AuthenticationToken
authParams = token:abc123
bootstrap.servers = localhost:9092
"""


@pytest.fixture(autouse=True)
def isolated_logging(tmp_path, monkeypatch):
    monkeypatch.setenv(LOG_DIR_ENV, str(tmp_path / "logs"))
    yield
    reset_logging()


@pytest.fixture
def conn_file(tmp_path) -> Path:
    path = tmp_path / "client.conf"
    path.write_text(CONN_CONF_TEXT, encoding="utf-8")
    return path


class RecordingHooks:
    """Hooks that record which lifecycle phases ran."""

    def __init__(self, execute_error=None, terminate_error=None, extra_options=None):
        self.calls = []
        self.execute_error = execute_error
        self.terminate_error = terminate_error
        self.extra_options = extra_options or []
        self.seen = {}

    def register(self, app):
        self.calls.append("register")
        for short, long, takes_value, required in self.extra_options:
            if required:
                app.add_required_option(short, long, takes_value, f"{long} option")
            else:
                app.add_optional_option(short, long, takes_value, f"{long} option")

    def validate(self, app):
        self.calls.append("validate")

    def execute(self, app):
        self.calls.append("execute")
        self.seen = {
            "num_msg": app.num_msg,
            "topic_name": app.topic_name,
            "conn_conf": app.conn_conf,
            "use_astra_streaming": app.use_astra_streaming,
        }
        if self.execute_error is not None:
            raise self.execute_error

    def terminate(self, app):
        self.calls.append("terminate")
        if self.terminate_error is not None:
            raise self.terminate_error


@pytest.fixture
def hooks() -> RecordingHooks:
    return RecordingHooks()
