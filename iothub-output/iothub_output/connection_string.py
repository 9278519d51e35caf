# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for building and inspecting IoT Hub Connection Strings"""
from collections.abc import Mapping
from typing import Optional

__all__ = ["ConnectionString", "build_connection_string", "with_gateway_host_name", "is_present"]

CS_DELIMITER = ";"
CS_VAL_SEPARATOR = "="

HOST_NAME = "HostName"
SHARED_ACCESS_KEY_NAME = "SharedAccessKeyName"
SHARED_ACCESS_KEY = "SharedAccessKey"
SHARED_ACCESS_SIGNATURE = "SharedAccessSignature"
DEVICE_ID = "DeviceId"
MODULE_ID = "ModuleId"
GATEWAY_HOST_NAME = "GatewayHostName"
X509 = "x509"

_valid_keys = [
    HOST_NAME,
    SHARED_ACCESS_KEY_NAME,
    SHARED_ACCESS_KEY,
    SHARED_ACCESS_SIGNATURE,
    DEVICE_ID,
    MODULE_ID,
    GATEWAY_HOST_NAME,
    X509,
]


class ConnectionString(Mapping):
    """Read-only view of the key/value pairs in a device or module connection string.

    The string form is the original input, so a ConnectionString can be handed back to
    anything that accepts a connection string.
    """

    def __init__(self, connection_string: str) -> None:
        """Initializer for ConnectionString

        :param str connection_string: Device or module connection string
        :raises: ValueError if the connection string is malformed or has an unusable set of keys
        :raises: TypeError if the connection string is not a string
        """
        if not isinstance(connection_string, str):
            raise TypeError("Connection String must be of type str")
        self._values = _parse_connection_string(connection_string)
        self._original = connection_string

    def __getitem__(self, key):
        return self._values[key]

    def __iter__(self):
        return iter(self._values)

    def __len__(self):
        return len(self._values)

    def __repr__(self):
        return self._original


def build_connection_string(
    hub_name: str,
    device_id: Optional[str] = None,
    module_id: Optional[str] = None,
    shared_access_key_name: Optional[str] = None,
    shared_access_key: Optional[str] = None,
) -> str:
    """Assemble a connection string from its parts.

    Parts are appended in a fixed order (HostName, DeviceId, ModuleId, SharedAccessKeyName,
    SharedAccessKey). Optional parts that are missing or blank are left out. Values are used
    as given, without escaping.

    :param str hub_name: Hostname of the IoT Hub. Always included.
    :param str device_id: The device identity
    :param str module_id: The module identity
    :param str shared_access_key_name: Name of the shared access policy
    :param str shared_access_key: The symmetric key
    :returns: The assembled connection string
    :rtype: str
    """
    parts = [(HOST_NAME, hub_name)]
    optional_parts = [
        (DEVICE_ID, device_id),
        (MODULE_ID, module_id),
        (SHARED_ACCESS_KEY_NAME, shared_access_key_name),
        (SHARED_ACCESS_KEY, shared_access_key),
    ]
    for key, value in optional_parts:
        if is_present(value):
            parts.append((key, value))
    return CS_DELIMITER.join(
        "{key}{sep}{value}".format(key=key, sep=CS_VAL_SEPARATOR, value=value)
        for key, value in parts
    )


def with_gateway_host_name(connection_string: str, gateway_host_name: str) -> str:
    """Return the connection string pointed at an IoT Edge gateway.

    If the connection string already names a gateway it is returned unchanged.
    """
    if ConnectionString(connection_string).get(GATEWAY_HOST_NAME):
        return connection_string
    return "{cs}{delim}{key}{sep}{value}".format(
        cs=connection_string,
        delim=CS_DELIMITER,
        key=GATEWAY_HOST_NAME,
        sep=CS_VAL_SEPARATOR,
        value=gateway_host_name,
    )


def is_present(value):
    """Return True if the value is set and not just whitespace"""
    return value is not None and len(value.strip()) > 0


def _parse_connection_string(connection_string):
    values = {}
    for token in connection_string.split(CS_DELIMITER):
        key, sep, value = token.partition(CS_VAL_SEPARATOR)
        if not sep:
            raise ValueError("Invalid Connection String - Unable to parse")
        if key not in _valid_keys:
            raise ValueError("Invalid Connection String - Invalid Key")
        if key in values:
            raise ValueError("Invalid Connection String - Duplicate Key: {}".format(key))
        values[key] = value
    _validate_keys(values)
    return values


def _validate_keys(values):
    """Raise ValueError unless the keys identify a device and exactly one way to authenticate"""
    schemes = [
        bool(values.get(SHARED_ACCESS_KEY)),
        bool(values.get(SHARED_ACCESS_SIGNATURE)),
        values.get(X509, "").lower() == "true",
    ]
    if schemes.count(True) > 1:
        raise ValueError("Invalid Connection String - Mixed authentication scheme")
    if not any(schemes):
        raise ValueError("Invalid Connection String - No authentication scheme")
    if not values.get(HOST_NAME) or not values.get(DEVICE_ID):
        raise ValueError("Invalid Connection String - Missing connection details")
