from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.text import Text

from .options import OptionRegistry, OptionSpec

USAGE_WIDTH = 150


def _synopsis_part(spec: OptionSpec) -> str:
    part = f"-{spec.Short}"
    if spec.TakesValue:
        part += " <arg>"

    return part if spec.Required else f"[{part}]"


def build_usage_table(registry: OptionRegistry) -> Table:
    table = Table(box=None, show_header=True, header_style="bold", pad_edge=False, padding=(0, 2))
    table.add_column("Option", no_wrap=True)
    table.add_column("Value", no_wrap=True)
    table.add_column("Required", no_wrap=True)
    table.add_column("Description")

    for spec in registry:
        table.add_row(
            spec.display,
            "<arg>" if spec.TakesValue else "",
            "required" if spec.Required else "optional",
            Text(spec.Description),
        )

    return table


def render_usage(app_name: str, registry: OptionRegistry, width: int = USAGE_WIDTH,
                 console: Optional[Console] = None):
    console = console or Console(width=width, highlight=False)

    synopsis = " ".join(_synopsis_part(spec) for spec in registry)
    console.print(Text(f"usage: {app_name} {synopsis}"))
    console.print(Text("Command Line Options:"))
    console.print(build_usage_table(registry))
    console.print()
