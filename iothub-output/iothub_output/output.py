# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the output that forwards metrics to Azure IoT Hub
"""
import enum
import functools
import logging
import threading
from typing import List, Optional
from azure.iot.device import IoTHubDeviceClient, IoTHubModuleClient, Message
from . import connection_string as cs
from . import constant, product_info
from .config import OutputConfig
from .credentials import CredentialSource, ResolvedCredentials, resolve_credentials
from .edge import EdgeEnvironment, EdgeWorkloadClient
from .exceptions import OutputError
from .models import Metric
from .serializer import JsonSerializer

logger = logging.getLogger(__name__)

SAMPLE_CONFIG = """
  ## One of the following sets required for configuration:
  #
  ## For use on IoT Edge:
  #
  # use_gateway = true
  #
  ## To specify a device/module connection string:
  #
  #  # 1.
  #  connection_string = ""
  #  use_gateway = true
  #
  ## To use a shared access key to form a connection string
  #
  #  # 2.
  #  hub_name = ""
  #  device_id = ""
  #  module_id = ""
  #  shared_access_key = ""
  #  use_gateway = true
"""


class ConnectionStatus(enum.Enum):
    DISCONNECTED = "disconnected"
    CONNECTING = "connecting"
    CONNECTED = "connected"


def _requires_client(f):
    """Decorator to indicate a method requires the output to already be initialized."""

    @functools.wraps(f)
    def check_client_wrapper(*args, **kwargs):
        this = args[0]  # a.k.a. self
        if this.client is None:
            raise OutputError("IoTHubOutput not initialized")
        else:
            return f(*args, **kwargs)

    return check_client_wrapper


class IoTHubOutput(object):
    """Output that sends batches of metrics to Azure IoT Hub as telemetry messages.

    The host drives the lifecycle: .init() once, .connect(), .write() for every batch,
    and .close() when done.
    """

    def __init__(self, config: Optional[OutputConfig] = None) -> None:
        """Initializer for IoTHubOutput

        :param config: The output configuration. An empty configuration means the
            IoT Edge environment provides the credentials.
        :type config: :class:`iothub_output.OutputConfig`
        """
        if config is None:
            config = OutputConfig()
        self.config = config
        self.client = None
        self.serializer: Optional[JsonSerializer] = None
        self.credentials: Optional[ResolvedCredentials] = None
        self._connection_status = ConnectionStatus.DISCONNECTED
        self._status_lock = threading.Lock()

    @property
    def connection_status(self) -> ConnectionStatus:
        return self._connection_status

    def description(self) -> str:
        return constant.OUTPUT_DESCRIPTION

    def sample_config(self) -> str:
        return SAMPLE_CONFIG

    def init(self) -> None:
        """Create the IoT Hub client and the serializer.

        :raises: ValueError if the connection string is invalid
        :raises: OSError if the credentials come from an IoT Edge environment that is not
            configured correctly
        :raises: :class:`iothub_output.exceptions.IoTEdgeError` if the trust bundle cannot be
            retrieved from the IoT Edge gateway
        """
        credentials = resolve_credentials(self.config)
        logger.info("Using credentials source: {}".format(credentials.source.value))

        if credentials.source is CredentialSource.DERIVED_FROM_PARTS:
            self.config.connection_string = credentials.connection_string

        if credentials.source is CredentialSource.FROM_ENVIRONMENT:
            client = IoTHubModuleClient.create_from_edge_environment(
                product_info=product_info.get_output_product_info()
            )
        else:
            client = self._create_client_from_connection_string(credentials.connection_string)

        self.client = client
        self.credentials = credentials
        self.serializer = JsonSerializer(timestamp_units=constant.DEFAULT_TIMESTAMP_UNITS)
        logger.debug("IoTHubOutput initialized")

    def _create_client_from_connection_string(self, connection_string):
        kwargs = {"product_info": product_info.get_output_product_info()}
        if self.config.use_gateway:
            edge_environment = EdgeEnvironment.from_environ()
            if edge_environment.has_gateway():
                logger.debug(
                    "Routing through IoT Edge gateway {}".format(edge_environment.gateway_host_name)
                )
                connection_string = cs.with_gateway_host_name(
                    connection_string, edge_environment.gateway_host_name
                )
                if edge_environment.has_workload():
                    workload_client = EdgeWorkloadClient(
                        workload_uri=edge_environment.workload_uri,
                        api_version=edge_environment.api_version,
                    )
                    kwargs["server_verification_cert"] = workload_client.get_trust_bundle()
            else:
                logger.warning(
                    "Gateway requested, but no IoT Edge gateway found in the environment - connecting directly to IoT Hub"
                )

        if cs.MODULE_ID in cs.ConnectionString(connection_string):
            client_class = IoTHubModuleClient
        else:
            client_class = IoTHubDeviceClient
        return client_class.create_from_connection_string(connection_string, **kwargs)

    @_requires_client
    def connect(self) -> None:
        """Connect the IoT Hub client.

        The underlying connect happens at most once. Once connected, further calls do nothing.
        A failed attempt leaves the output disconnected, so a later call may try again.

        :raises: OutputError if the output has not been initialized
        :raises: Any error raised by the IoT Hub client while connecting
        """
        with self._status_lock:
            # close() may have released the client while waiting for the lock
            if self.client is None:
                raise OutputError("IoTHubOutput not initialized")
            if self._connection_status is ConnectionStatus.CONNECTED:
                logger.debug("Already connected - skipping")
                return
            self._connection_status = ConnectionStatus.CONNECTING
            try:
                self.client.connect()
            except Exception:
                self._connection_status = ConnectionStatus.DISCONNECTED
                raise
            self._connection_status = ConnectionStatus.CONNECTED
        logger.info("IoTHubOutput connected")

    def close(self) -> None:
        """Shut down the IoT Hub client and release it."""
        if self.client is None:
            return
        with self._status_lock:
            if self.client is None:
                return
            try:
                self.client.shutdown()
            finally:
                self.client = None
                self._connection_status = ConnectionStatus.DISCONNECTED
        logger.info("IoTHubOutput closed")

    @_requires_client
    def write(self, metrics: List[Metric]) -> None:
        """Send a batch of metrics to IoT Hub as a single telemetry message.

        :param list metrics: The metrics to send. An empty batch sends nothing.

        :raises: OutputError if the output has not been initialized
        :raises: :class:`iothub_output.exceptions.SerializationError` if the batch cannot be
            serialized. Nothing is sent in this case.
        :raises: Any error raised by the IoT Hub client while sending
        """
        if not metrics:
            logger.debug("Empty batch - nothing to send")
            return
        client = self.client
        if client is None:
            raise OutputError("IoTHubOutput not initialized")
        payload = self.serializer.serialize_batch(metrics)
        message = Message(
            payload,
            content_encoding=constant.TELEMETRY_CONTENT_ENCODING,
            content_type=constant.TELEMETRY_CONTENT_TYPE,
        )
        client.send_message(message)
        logger.debug("Sent batch of {} metrics".format(len(metrics)))
