from typing import Dict, Iterator, List

from pydantic import BaseModel, ConfigDict

from .exceptions import ProgrammingError


class OptionSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    Short: str
    Long: str
    TakesValue: bool = False
    Required: bool = False
    Description: str = ""

    @property
    def display(self) -> str:
        return f"-{self.Short},--{self.Long}"


class OptionRegistry:
    def __init__(self):
        self._by_short: Dict[str, OptionSpec] = {}
        self._by_long: Dict[str, OptionSpec] = {}
        self._order: List[OptionSpec] = []
        self._frozen = False

    def register_required(self, short: str, long: str, takes_value: bool, description: str) -> OptionSpec:
        return self._register(short, long, takes_value, True, description)

    def register_optional(self, short: str, long: str, takes_value: bool, description: str) -> OptionSpec:
        return self._register(short, long, takes_value, False, description)

    def _register(self, short: str, long: str, takes_value: bool, required: bool, description: str) -> OptionSpec:
        if self._frozen:
            raise ProgrammingError(f"Cannot register option '{short}' after the input parameters were parsed")

        if not short or not long:
            raise ProgrammingError("Both a short and a long option key are required")

        if short in self._by_short:
            raise ProgrammingError(f"Duplicate short option key '{short}'")

        if long in self._by_long:
            raise ProgrammingError(f"Duplicate long option key '{long}'")

        spec = OptionSpec(Short=short, Long=long, TakesValue=takes_value, Required=required,
                          Description=description)

        self._by_short[short] = spec
        self._by_long[long] = spec
        self._order.append(spec)

        return spec

    def lookup(self, short: str) -> OptionSpec:
        try:
            return self._by_short[short]
        except KeyError:
            raise ProgrammingError(f"Unknown option key '{short}'") from None

    def freeze(self):
        self._frozen = True

    @property
    def frozen(self) -> bool:
        return self._frozen

    def __contains__(self, short: object) -> bool:
        return short in self._by_short

    def __iter__(self) -> Iterator[OptionSpec]:
        return iter(list(self._order))

    def __len__(self) -> int:
        return len(self._order)
