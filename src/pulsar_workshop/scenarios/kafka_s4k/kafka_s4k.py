import typer

from pulsar_workshop.core import S4K_API_TYPE, run_cmd_app
from pulsar_workshop.scenarios.passthrough import PASSTHROUGH_CONTEXT
from . import iot_sensor_kafka_consumer

app = typer.Typer(help="Demos using a Kafka client against Starlight for Kafka (S4K).")


@app.command("iot-sensor-kafka-consumer", help="Consume IoT sensor readings with a Kafka consumer group.",
             context_settings=PASSTHROUGH_CONTEXT, add_help_option=False)
def iot_sensor_consumer(ctx: typer.Context):
    """
    Consume IoT sensor readings through the Kafka protocol.

    :param ctx: Carries the demo options, e.g. "-n 10 -t <topic> -c client.conf -cg <group>".
    :return:
    """
    exit_code = run_cmd_app(iot_sensor_kafka_consumer.APP_NAME, ctx.args,
                            iot_sensor_kafka_consumer.IoTSensorKafkaConsumer(), api_type=S4K_API_TYPE)
    raise typer.Exit(code=exit_code)
