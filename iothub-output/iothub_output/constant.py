# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module defines constants for use across the iothub-output package
"""

VERSION = "1.0.0"
OUTPUT_NAME = "azure_iothub"
OUTPUT_IDENTIFIER = "iothub-output-py"
OUTPUT_DESCRIPTION = "Output plugin for Azure IoT Hub Edge Module"

# IoT Edge runtime environment
EDGE_GATEWAY_HOST_NAME_ENV = "IOTEDGE_GATEWAYHOSTNAME"
EDGE_MODULE_GENERATION_ID_ENV = "IOTEDGE_MODULEGENERATIONID"
EDGE_WORKLOAD_URI_ENV = "IOTEDGE_WORKLOADURI"
EDGE_MODULE_ID_ENV = "IOTEDGE_MODULEID"
EDGE_API_VERSION_ENV = "IOTEDGE_APIVERSION"
EDGE_DEFAULT_API_VERSION = "2019-01-30"

# Serialized telemetry
DEFAULT_TIMESTAMP_UNITS = 1.0
TELEMETRY_CONTENT_TYPE = "application/json"
TELEMETRY_CONTENT_ENCODING = "utf-8"
