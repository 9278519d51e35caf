# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import pytest
from iothub_output.models import Metric

hostname = "__FAKE_HOSTNAME__"
device_id = "__FAKE_DEVICE_ID__"
module_id = "__FAKE_MODULE_ID__"
shared_access_key = "Zm9vYmFy"
shared_access_key_name = "__FAKE_KEY_NAME__"
gateway_hostname = "__FAKE_GATEWAY_HOSTNAME__"

device_connection_string_format = "HostName={hostname};DeviceId={device_id};SharedAccessKey={shared_access_key}"
module_connection_string_format = "HostName={hostname};DeviceId={device_id};ModuleId={module_id};SharedAccessKey={shared_access_key}"


@pytest.fixture
def device_connection_string():
    return device_connection_string_format.format(
        hostname=hostname, device_id=device_id, shared_access_key=shared_access_key
    )


@pytest.fixture
def module_connection_string():
    return module_connection_string_format.format(
        hostname=hostname,
        device_id=device_id,
        module_id=module_id,
        shared_access_key=shared_access_key,
    )


@pytest.fixture
def edge_container_environment():
    return {
        "IOTEDGE_MODULEID": "__FAKE_MODULE_ID__",
        "IOTEDGE_DEVICEID": "__FAKE_DEVICE_ID__",
        "IOTEDGE_IOTHUBHOSTNAME": "__FAKE_HOSTNAME__",
        "IOTEDGE_GATEWAYHOSTNAME": "__FAKE_GATEWAY_HOSTNAME__",
        "IOTEDGE_APIVERSION": "__FAKE_API_VERSION__",
        "IOTEDGE_MODULEGENERATIONID": "__FAKE_MODULE_GENERATION_ID__",
        "IOTEDGE_WORKLOADURI": "http://__FAKE_WORKLOAD_URI__/",
    }


@pytest.fixture
def metric():
    return Metric(
        name="cpu",
        tags={"host": "edge-01", "cpu": "cpu-total"},
        fields={"usage_idle": 98.5, "usage_user": 1, "online": True},
        time=1700000000123456789,
    )


@pytest.fixture
def metrics(metric):
    second = Metric(
        name="mem", tags={"host": "edge-01"}, fields={"used_percent": 41.0}, time=1700000001000000000
    )
    return [metric, second]


@pytest.fixture
def arbitrary_exception():
    """An exception type not raised anywhere else, so only broad handlers can catch it"""

    class ArbitraryException(Exception):
        pass

    return ArbitraryException()
