import typer

from .kafka_s4k import app as kafka_s4k_app
from .native_pulsar import app as native_pulsar_app

app = typer.Typer(help="Pulsar workshop client demos.")

app.add_typer(native_pulsar_app, name="native-pulsar")
app.add_typer(kafka_s4k_app, name="kafka-s4k")
