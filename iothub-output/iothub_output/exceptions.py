# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Define user-facing exceptions to be shared across the iothub-output package"""


class OutputError(Exception):
    """Represents a failure from the IoT Hub output"""

    pass


class SerializationError(OutputError):
    """Represents a failure converting metrics into a telemetry payload"""

    pass


class IoTEdgeError(OutputError):
    """Represents a failure reported by the IoT Edge workload API"""

    pass
