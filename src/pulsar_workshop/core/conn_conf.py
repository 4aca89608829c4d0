import logging
from pathlib import Path
from typing import Dict, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from .exceptions import InvalidParamError

logger = logging.getLogger(__name__)

SERVICE_URL_KEYS = ("brokerServiceUrl", "serviceUrl")
AUTH_PARAMS_KEY = "authParams"
TOKEN_PREFIX = "token:"


class ClientConnConf(BaseModel):
    model_config = ConfigDict(frozen=True)

    BrokerServiceUrl: str = Field(min_length=1)
    Params: Dict[str, str] = Field(default_factory=dict)
    UseAstraStreaming: bool = False

    def get(self, key: str, default: Optional[str] = None) -> Optional[str]:
        return self.Params.get(key, default)

    def has(self, key: str) -> bool:
        return key in self.Params

    @property
    def auth_token(self) -> Optional[str]:
        auth_params = self.Params.get(AUTH_PARAMS_KEY, "").strip()
        if not auth_params:
            return None

        if auth_params.startswith(TOKEN_PREFIX):
            return auth_params[len(TOKEN_PREFIX):]

        return auth_params


def parse_conn_lines(text: str, source: str = "<string>") -> Dict[str, str]:
    pairs: Dict[str, str] = {}

    for line_no, line in enumerate(text.splitlines(), start=1):
        line = line.strip()
        if not line or line.startswith("#"):
            continue

        if "=" not in line:
            logger.warning(f"Ignoring malformed line {line_no} in {source}: {line}")
            continue

        key, value = line.split("=", 1)
        key = key.strip()
        if not key:
            logger.warning(f"Ignoring line {line_no} without a key in {source}")
            continue

        pairs[key] = value.strip()

    return pairs


def load_conn_conf(conn_file: Union[str, Path], use_astra_streaming: bool = False) -> ClientConnConf:
    """
    Load the client connection settings of a demo.

    :param conn_file: Path to a "client.conf" style file of "key = value" lines.
    :param use_astra_streaming: Whether the broker is a hosted Astra Streaming endpoint.
    :return:
    """
    path = Path(conn_file)

    if not path.is_file():
        raise InvalidParamError(f"Connection file does not exist or is not a file: {path}", option="c")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as ex:
        raise InvalidParamError(f"Failed to read connection file {path}: {ex}", option="c") from ex

    pairs = parse_conn_lines(text, source=str(path))

    service_url = None
    for url_key in SERVICE_URL_KEYS:
        candidate = pairs.pop(url_key, None)
        if service_url is None and candidate:
            service_url = candidate

    if not service_url:
        raise InvalidParamError(f"Connection file {path} has no '{SERVICE_URL_KEYS[0]}' setting", option="c")

    logger.debug(f"Loaded connection settings from {path}: {sorted(pairs.keys())}")

    return ClientConnConf(BrokerServiceUrl=service_url, Params=pairs, UseAstraStreaming=use_astra_streaming)
