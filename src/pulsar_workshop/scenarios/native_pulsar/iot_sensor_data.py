from pulsar_workshop.core import WorkshopRuntimeError


def sensor_data_schema():
    """Avro schema of an IoT sensor reading, built lazily so the module imports without pulsar-client."""
    try:
        from pulsar.schema import AvroSchema, Boolean, Double, Record, String
    except ImportError as ex:
        raise WorkshopRuntimeError("The native Pulsar demos need the 'pulsar-client' package") from ex

    class IoTSensorData(Record):
        _avro_namespace = "com.example.pulsarworkshop"

        ts = Double()
        device = String()
        co = Double()
        humidity = Double()
        light = Boolean()
        lpg = Double()
        motion = Boolean()
        smoke = Double()
        temp = Double()

    return AvroSchema(IoTSensorData)
