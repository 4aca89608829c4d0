import typer

from pulsar_workshop.core import NATIVE_PULSAR_API_TYPE, run_cmd_app
from pulsar_workshop.scenarios.passthrough import PASSTHROUGH_CONTEXT
from . import iot_sensor_consumer_avro, redelivery_consumer

app = typer.Typer(help="Demos using the native Pulsar client.")


@app.command("iot-sensor-consumer-avro", help="Consume Avro encoded IoT sensor readings.",
             context_settings=PASSTHROUGH_CONTEXT, add_help_option=False)
def iot_sensor_consumer(ctx: typer.Context):
    """
    Consume IoT sensor readings with an Avro schema.

    :param ctx: Carries the demo options, e.g. "-n 10 -t <topic> -c client.conf -sbn <subscription>".
    :return:
    """
    exit_code = run_cmd_app(iot_sensor_consumer_avro.APP_NAME, ctx.args,
                            iot_sensor_consumer_avro.IoTSensorConsumerAvro(), api_type=NATIVE_PULSAR_API_TYPE)
    raise typer.Exit(code=exit_code)


@app.command("redelivery-consumer", help="Negatively acknowledge messages until they reach a dead letter topic.",
             context_settings=PASSTHROUGH_CONTEXT, add_help_option=False)
def redelivery(ctx: typer.Context):
    """
    Demonstrate message redelivery and dead letter topics.

    :param ctx: Carries the demo options, e.g. "-n -1 -t <topic> -c client.conf -dlt <topic>".
    :return:
    """
    exit_code = run_cmd_app(redelivery_consumer.APP_NAME, ctx.args,
                            redelivery_consumer.RedeliveryConsumer(), api_type=NATIVE_PULSAR_API_TYPE)
    raise typer.Exit(code=exit_code)
