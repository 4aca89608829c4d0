import logging
from typing import Any, Dict

from .conn_conf import ClientConnConf
from .exceptions import InvalidParamError, WorkshopRuntimeError

logger = logging.getLogger(__name__)

NATIVE_PULSAR_API_TYPE = "native-pulsar"
S4K_API_TYPE = "s4k"

AUTH_PLUGIN_KEY = "authPlugin"
AUTH_PARAMS_KEY = "authParams"
TLS_TRUST_CERTS_KEY = "tlsTrustCertsFilePath"
TLS_HOSTNAME_VERIFICATION_KEY = "tlsEnableHostnameVerification"
BOOTSTRAP_SERVERS_KEY = "bootstrap.servers"
TENANT_KEY = "tenant"


def pulsar_client_kwargs(conn_conf: ClientConnConf) -> Dict[str, Any]:
    """Keyword arguments of pulsar.Client() other than the service url and authentication."""
    kwargs: Dict[str, Any] = {}

    trust_certs = conn_conf.get(TLS_TRUST_CERTS_KEY)
    if trust_certs:
        kwargs["tls_trust_certs_file_path"] = trust_certs

    hostname_verification = conn_conf.get(TLS_HOSTNAME_VERIFICATION_KEY)
    if hostname_verification:
        kwargs["tls_validate_hostname"] = hostname_verification.strip().lower() == "true"

    return kwargs


def create_pulsar_client(conn_conf: ClientConnConf):
    try:
        import pulsar
    except ImportError as ex:
        raise WorkshopRuntimeError(
            "The native Pulsar demos need the 'pulsar-client' package (pip install pulsar-workshop[pulsar])"
        ) from ex

    kwargs = pulsar_client_kwargs(conn_conf)

    if conn_conf.UseAstraStreaming:
        token = conn_conf.auth_token
        if not token:
            raise InvalidParamError("Astra Streaming requires a token in 'authParams'", option="c")
        kwargs["authentication"] = pulsar.AuthenticationToken(token)
    elif conn_conf.has(AUTH_PLUGIN_KEY) and conn_conf.has(AUTH_PARAMS_KEY):
        kwargs["authentication"] = pulsar.Authentication(conn_conf.get(AUTH_PLUGIN_KEY),
                                                         conn_conf.get(AUTH_PARAMS_KEY))

    logger.info(f"Connecting to {conn_conf.BrokerServiceUrl}")

    return pulsar.Client(conn_conf.BrokerServiceUrl, **kwargs)


def kafka_base_config(conn_conf: ClientConnConf) -> Dict[str, str]:
    """
    Base librdkafka configuration for the Kafka compatible (S4K) endpoint.

    :param conn_conf: Needs a "bootstrap.servers" entry. Astra Streaming also needs "tenant" and "authParams".
    :return:
    """
    bootstrap_servers = conn_conf.get(BOOTSTRAP_SERVERS_KEY)
    if not bootstrap_servers:
        raise InvalidParamError(f"Connection file has no '{BOOTSTRAP_SERVERS_KEY}' setting", option="c")

    config = {BOOTSTRAP_SERVERS_KEY: bootstrap_servers}

    if conn_conf.UseAstraStreaming:
        tenant = conn_conf.get(TENANT_KEY)
        token = conn_conf.auth_token
        if not tenant or not token:
            raise InvalidParamError(f"Astra Streaming requires '{TENANT_KEY}' and '{AUTH_PARAMS_KEY}' settings",
                                    option="c")
        config.update({
            "security.protocol": "SASL_SSL",
            "sasl.mechanism": "PLAIN",
            "sasl.username": tenant,
            "sasl.password": f"token:{token}",
        })

    return config


def create_kafka_consumer(config: Dict[str, str]):
    try:
        from confluent_kafka import Consumer
    except ImportError as ex:
        raise WorkshopRuntimeError(
            "The S4K demos need the 'confluent-kafka' package (pip install pulsar-workshop[kafka])"
        ) from ex

    return Consumer(config)
