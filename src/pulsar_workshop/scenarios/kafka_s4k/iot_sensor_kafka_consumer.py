import logging
import sys

from pulsar_workshop.core import (INFINITE_NUM_MSG, S4K_API_TYPE, CmdApp, InvalidParamError, WorkshopError,
                                  WorkshopRuntimeError, create_kafka_consumer, kafka_base_config, run_cmd_app)

APP_NAME = "IoTSensorKafkaConsumer"
POLL_TIMEOUT_SECONDS = 1.0
MAX_BATCH_SIZE = 100

logger = logging.getLogger(__name__)


def _decode(data):
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")

    return data


class IoTSensorKafkaConsumer:
    def __init__(self):
        self.consumer_group_id = None
        self.kafka_consumer = None

    def register(self, app: CmdApp):
        app.add_required_option("cg", "group.id", True, "Consumer group ID.")

        logger.info(f"Starting application: \"{app.app_name}\" ...")

    def validate(self, app: CmdApp):
        if not app.topic_name:
            raise InvalidParamError("Must provide a topic name for a consumer!", option="t")

        # (Required) consumer group
        self.consumer_group_id = app.args.get_str("cg")

    def consumer_config(self, app: CmdApp) -> dict:
        config = kafka_base_config(app.conn_conf)
        config["group.id"] = self.consumer_group_id
        config["enable.auto.commit"] = "false"
        return config

    def execute(self, app: CmdApp):
        try:
            if self.kafka_consumer is None:
                self.kafka_consumer = create_kafka_consumer(self.consumer_config(app))

            self.kafka_consumer.subscribe([app.topic_name])

            msg_recvd = 0
            while app.more_messages(msg_recvd):
                batch_size = MAX_BATCH_SIZE
                if app.num_msg != INFINITE_NUM_MSG:
                    batch_size = min(MAX_BATCH_SIZE, app.num_msg - msg_recvd)

                records = self.kafka_consumer.consume(num_messages=batch_size, timeout=POLL_TIMEOUT_SECONDS)

                consumed = 0
                for record in records:
                    error = record.error()
                    if error is not None:
                        if error.fatal():
                            raise WorkshopRuntimeError(f"Fatal Kafka consumer error: {error}")
                        logger.warning(f"({self.consumer_group_id}) Consumer error: {error}")
                        continue

                    logger.info(f"({self.consumer_group_id}) Message received and acknowledged: "
                                f"key={_decode(record.key())}; headers={record.headers()}; "
                                f"value={_decode(record.value())}")
                    consumed += 1

                if consumed > 0:
                    self.kafka_consumer.commit(asynchronous=False)
                    msg_recvd += consumed
        except WorkshopError:
            raise
        except Exception as ex:
            raise WorkshopRuntimeError(f"Unexpected error when consuming Kafka messages: {ex}") from ex

    def terminate(self, app: CmdApp):
        try:
            if self.kafka_consumer is not None:
                self.kafka_consumer.close()
        finally:
            self.kafka_consumer = None
            logger.info(f"Terminating application: \"{app.app_name}\" ...")


def main():
    sys.exit(run_cmd_app(APP_NAME, sys.argv[1:], IoTSensorKafkaConsumer(), api_type=S4K_API_TYPE))


if __name__ == "__main__":
    main()
