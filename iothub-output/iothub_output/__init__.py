"""IoT Hub Output

This library provides an output that forwards telemetry from a metrics-collection agent
to Azure IoT Hub, either directly or through an IoT Edge gateway.
"""

from . import registry
from .constant import OUTPUT_NAME
from .config import OutputConfig  # noqa: F401
from .credentials import (  # noqa: F401
    CredentialSource,
    ResolvedCredentials,
    resolve_credentials,
)
from .output import IoTHubOutput, ConnectionStatus  # noqa: F401
from .serializer import JsonSerializer  # noqa: F401
from .exceptions import OutputError, SerializationError, IoTEdgeError  # noqa: F401
from .models import Metric  # noqa: F401

registry.add(OUTPUT_NAME, IoTHubOutput)
