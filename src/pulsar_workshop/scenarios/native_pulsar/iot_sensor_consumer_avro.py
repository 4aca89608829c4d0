import logging
import sys

from pulsar_workshop.core import (NATIVE_PULSAR_API_TYPE, CmdApp, InvalidParamError, WorkshopError,
                                  WorkshopRuntimeError, create_pulsar_client, run_cmd_app)
from .iot_sensor_data import sensor_data_schema

APP_NAME = "IoTSensorConsumerAvro"

# Accepted spellings mapped to pulsar.ConsumerType member names.
SUBSCRIPTION_TYPES = {
    "Exclusive": "Exclusive",
    "Shared": "Shared",
    "Failover": "Failover",
    "KeyShared": "KeyShared",
    "Key_Shared": "KeyShared",
}
DEFAULT_SUBSCRIPTION_TYPE = "Exclusive"

logger = logging.getLogger(__name__)


def subscribe(pulsar_client, topic_name: str, subscription_name: str, subscription_type: str):
    import pulsar

    return pulsar_client.subscribe(
        topic_name,
        subscription_name,
        consumer_type=getattr(pulsar.ConsumerType, subscription_type),
        schema=sensor_data_schema(),
    )


class IoTSensorConsumerAvro:
    def __init__(self):
        self.subscription_name = None
        self.subscription_type = DEFAULT_SUBSCRIPTION_TYPE
        self.pulsar_client = None
        self.pulsar_consumer = None

    def register(self, app: CmdApp):
        app.add_optional_option("sbt", "subType", True, "Pulsar subscription type.")
        app.add_required_option("sbn", "subName", True, "Pulsar subscription name.")

        logger.info(f"Starting application: \"{app.app_name}\" ...")

    def validate(self, app: CmdApp):
        if not app.topic_name:
            raise InvalidParamError("Must provide a topic name for a consumer!", option="t")

        # (Required) subscription name
        self.subscription_name = app.args.get_str("sbn")
        if not self.subscription_name:
            raise InvalidParamError("Must provide a subscription name for a consumer!", option="sbn")

        # (Optional) subscription type, unknown names fall back to Exclusive
        sub_type = app.args.get_str("sbt")
        if sub_type:
            if sub_type in SUBSCRIPTION_TYPES:
                self.subscription_type = SUBSCRIPTION_TYPES[sub_type]
            else:
                logger.warning(f"Unknown subscription type '{sub_type}', using {DEFAULT_SUBSCRIPTION_TYPE}")
                self.subscription_type = DEFAULT_SUBSCRIPTION_TYPE

    def execute(self, app: CmdApp):
        try:
            if self.pulsar_client is None:
                self.pulsar_client = create_pulsar_client(app.conn_conf)

            if self.pulsar_consumer is None:
                self.pulsar_consumer = subscribe(self.pulsar_client, app.topic_name, self.subscription_name,
                                                 self.subscription_type)

            msg_recvd = 0
            while app.more_messages(msg_recvd):
                message = self.pulsar_consumer.receive()
                logger.info(f"({self.pulsar_consumer.consumer_name()}) Message received and acknowledged: "
                            f"key={message.partition_key()}; properties={message.properties()}; "
                            f"value={message.value()}")
                self.pulsar_consumer.acknowledge(message)
                msg_recvd += 1
        except WorkshopError:
            raise
        except Exception as ex:
            raise WorkshopRuntimeError(f"Unexpected error when consuming Pulsar messages: {ex}") from ex

    def terminate(self, app: CmdApp):
        try:
            try:
                if self.pulsar_consumer is not None:
                    self.pulsar_consumer.close()
            finally:
                if self.pulsar_client is not None:
                    self.pulsar_client.close()
        except Exception as ex:
            raise WorkshopRuntimeError("Failed to terminate Pulsar consumer or client!") from ex
        finally:
            self.pulsar_consumer = None
            self.pulsar_client = None
            logger.info(f"Terminating application: \"{app.app_name}\" ...")


def main():
    sys.exit(run_cmd_app(APP_NAME, sys.argv[1:], IoTSensorConsumerAvro(), api_type=NATIVE_PULSAR_API_TYPE))


if __name__ == "__main__":
    main()
