import logging
import sys

from pulsar_workshop.core import (NATIVE_PULSAR_API_TYPE, CmdApp, InvalidParamError, WorkshopError,
                                  WorkshopRuntimeError, create_pulsar_client, run_cmd_app)

APP_NAME = "RedeliveryConsumer"
SUB_NAME = "demo-subscription"
MAX_REDELIVER_COUNT = 5
NEGATIVE_ACK_REDELIVERY_DELAY_MS = 1000

logger = logging.getLogger(__name__)


def subscribe(pulsar_client, topic_name: str, dead_letter_topic_name: str):
    import pulsar

    return pulsar_client.subscribe(
        topic_name,
        SUB_NAME,
        consumer_type=pulsar.ConsumerType.Shared,
        negative_ack_redelivery_delay_ms=NEGATIVE_ACK_REDELIVERY_DELAY_MS,
        dead_letter_policy=pulsar.ConsumerDeadLetterPolicy(
            max_redeliver_count=MAX_REDELIVER_COUNT,
            dead_letter_topic=dead_letter_topic_name,
        ),
    )


class RedeliveryConsumer:
    """
    Negatively acknowledges every message it receives, so each one is redelivered until
    the redelivery attempts are exhausted and it lands on the dead letter topic.
    """

    def __init__(self):
        self.dead_letter_topic_name = None
        self.pulsar_client = None
        self.pulsar_consumer = None

    def register(self, app: CmdApp):
        app.add_required_option("dlt", "deadLetterTopic", True,
                                "Pulsar dead letter topic where message go if redelivery fails.")

        logger.info(f"Starting application: \"{app.app_name}\" ...")

    def validate(self, app: CmdApp):
        if not app.topic_name:
            raise InvalidParamError("Must provide a topic name for a consumer!", option="t")

        # (Required) dead letter topic
        self.dead_letter_topic_name = app.args.get_str("dlt")

    def execute(self, app: CmdApp):
        try:
            self.pulsar_client = create_pulsar_client(app.conn_conf)
            logger.info(f"Using dead letter topic: {self.dead_letter_topic_name}")

            self.pulsar_consumer = subscribe(self.pulsar_client, app.topic_name, self.dead_letter_topic_name)

            msg_recvd = 0
            while app.more_messages(msg_recvd):
                message = self.pulsar_consumer.receive()
                logger.info(f"Received message: {message.data().decode('utf-8', errors='replace')} "
                            f"(redelivery count: {message.redelivery_count()})")
                self.pulsar_consumer.negative_acknowledge(message)
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
    sys.exit(run_cmd_app(APP_NAME, sys.argv[1:], RedeliveryConsumer(), api_type=NATIVE_PULSAR_API_TYPE))


if __name__ == "__main__":
    main()
