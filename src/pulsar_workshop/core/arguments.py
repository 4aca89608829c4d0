import logging
import re
from pathlib import Path
from typing import Dict, Mapping, Optional, Sequence

import click

from .exceptions import InvalidParamError
from .options import OptionRegistry, OptionSpec

logger = logging.getLogger(__name__)

TRUE_STRINGS = frozenset({"true", "yes", "on", "1"})
DECIMAL_PATTERN = re.compile(r"[+-]?[0-9]+")


def is_blank(value: Optional[str]) -> bool:
    return value is None or len(value.strip()) == 0


def _to_click_option(spec: OptionSpec) -> click.Option:
    # The bare short key is the click parameter name, so parsed values stay keyed by it.
    decls = [spec.Short, f"-{spec.Short}", f"--{spec.Long}"]

    if spec.TakesValue:
        return click.Option(decls, type=click.STRING, default=None, help=spec.Description)

    return click.Option(decls, is_flag=True, default=False, help=spec.Description)


def build_command(prog_name: str, registry: OptionRegistry) -> click.Command:
    return click.Command(
        name=prog_name,
        params=[_to_click_option(spec) for spec in registry],
        add_help_option=False,
    )


class ParsedArgs:
    def __init__(self, registry: OptionRegistry, values: Mapping[str, str]):
        self._registry = registry
        self._values: Dict[str, str] = dict(values)

    def has(self, key: str) -> bool:
        return key in self._values

    def raw(self, key: str) -> Optional[str]:
        return self._values.get(key)

    def as_dict(self) -> Dict[str, str]:
        return dict(self._values)

    def _checked_value(self, key: str) -> Optional[str]:
        spec = self._registry.lookup(key)
        value = self._values.get(key)

        if spec.Required and is_blank(value):
            raise InvalidParamError(f"Empty value for argument '{key}'", option=key)

        return value

    def get_str(self, key: str, default: Optional[str] = None) -> Optional[str]:
        value = self._checked_value(key)

        if not is_blank(value):
            return value

        return default

    def get_int(self, key: str, default: int = 0) -> int:
        """
        Integer value of an option.

        Non-numeric input falls back to ``default`` instead of failing, e.g. ``--retries=abc``
        yields the registered default.

        :param key: Short option key.
        :param default: Value used when the option is absent, blank or not a number.
        :return:
        """
        value = self._checked_value(key)

        if is_blank(value):
            return default

        # int() alone would also take "1_000" and non-ASCII digits
        if DECIMAL_PATTERN.fullmatch(value.strip()) is None:
            logger.debug(f"Non-numeric value '{value}' for option '{key}', using default {default}")
            return default

        return int(value.strip())

    def get_bool(self, key: str, default: bool = False) -> bool:
        value = self._checked_value(key)

        if is_blank(value):
            return default

        return value.strip().lower() in TRUE_STRINGS

    def get_file(self, key: str) -> Optional[Path]:
        value = self._checked_value(key)

        if is_blank(value):
            return None

        try:
            return Path(value).expanduser().resolve()
        except (OSError, RuntimeError) as ex:
            raise InvalidParamError(f"Invalid file path for param '{key}': {value}", option=key) from ex


def parse_input_params(prog_name: str, registry: OptionRegistry, raw_args: Sequence[str],
                       help_key: Optional[str] = "h") -> ParsedArgs:
    command = build_command(prog_name, registry)

    try:
        ctx = command.make_context(prog_name, list(raw_args))
    except click.UsageError as ex:
        raise InvalidParamError(f"Failed to parse application CLI input parameters: {ex.format_message()}") from ex

    values: Dict[str, str] = {}
    for key, value in ctx.params.items():
        if value is None or value is False:
            continue
        values[key] = "true" if value is True else value

    if help_key is not None and help_key in values:
        return ParsedArgs(registry, values)

    for spec in registry:
        if spec.Required and is_blank(values.get(spec.Short)):
            raise InvalidParamError(f"Missing required option: {spec.display}", option=spec.Short)

    return ParsedArgs(registry, values)
