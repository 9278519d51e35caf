# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the configuration record for the IoT Hub output"""

import io
import json
import logging
from typing import Any, Mapping, Union
from typing_extensions import Self
from .connection_string import is_present

logger = logging.getLogger(__name__)

USE_GATEWAY = "use_gateway"
CONNECTION_STRING = "connection_string"
HUB_NAME = "hub_name"
DEVICE_ID = "device_id"
MODULE_ID = "module_id"
SHARED_ACCESS_KEY = "shared_access_key"
SHARED_ACCESS_KEY_NAME = "shared_access_key_name"

_string_keys = [
    CONNECTION_STRING,
    HUB_NAME,
    DEVICE_ID,
    MODULE_ID,
    SHARED_ACCESS_KEY,
    SHARED_ACCESS_KEY_NAME,
]
_valid_keys = [USE_GATEWAY] + _string_keys

_secret_keys = [CONNECTION_STRING, SHARED_ACCESS_KEY]

_true_strings = ["true", "1", "yes", "on"]
_false_strings = ["false", "0", "no", "off"]


class OutputConfig:
    """
    Configuration of the IoT Hub output.

    A usable configuration provides one of the following:

    1. a connection string
    2. a hub name, shared access key and shared access key name
    3. a hub name, shared access key and device id

    Anything else is not valid, and the output falls back to the IoT Edge environment.
    """

    def __init__(
        self,
        *,
        use_gateway: bool = False,
        connection_string: str = "",
        hub_name: str = "",
        device_id: str = "",
        module_id: str = "",
        shared_access_key: str = "",
        shared_access_key_name: str = "",
    ) -> None:
        """Initializer for OutputConfig

        :param bool use_gateway: Route traffic through the IoT Edge gateway the output is
            deployed under
        :param str connection_string: Device or module connection string
        :param str hub_name: Hostname of the IoT Hub
        :param str device_id: The device identity
        :param str module_id: The module identity
        :param str shared_access_key: Symmetric key used to authorize the device or module
        :param str shared_access_key_name: Name of the shared access policy
        """
        self.use_gateway = use_gateway
        self.connection_string = connection_string
        self.hub_name = hub_name
        self.device_id = device_id
        self.module_id = module_id
        self.shared_access_key = shared_access_key
        self.shared_access_key_name = shared_access_key_name

    def __repr__(self):
        values = []
        for key in _valid_keys:
            value = getattr(self, key)
            if key in _secret_keys and is_present(value):
                value = "***"
            values.append("{}={!r}".format(key, value))
        return "OutputConfig({})".format(", ".join(values))

    @classmethod
    def from_dict(cls, values: Mapping[str, Any]) -> Self:
        """Instantiate the configuration from a text key/value mapping

        :param values: Mapping of configuration keys to values. Keys match the initializer
            parameters.

        :raises: TypeError if an unsupported key or a value of the wrong type is provided
        :raises: ValueError if 'use_gateway' cannot be interpreted as a boolean
        """
        kwargs = {}
        for key, value in values.items():
            if key not in _valid_keys:
                raise TypeError("Unsupported configuration key: '{}'".format(key))
            if key == USE_GATEWAY:
                kwargs[key] = _sanitize_bool(value)
            else:
                kwargs[key] = _sanitize_string(key, value)
        return cls(**kwargs)

    @classmethod
    def from_file(cls, path: Union[str, bytes]) -> Self:
        """Instantiate the configuration from a JSON file holding a single object

        :param str path: Path of the configuration file

        :raises: OSError if the file cannot be read
        :raises: ValueError if the file does not contain a JSON object
        :raises: TypeError if an unsupported key or a value of the wrong type is provided
        """
        return cls.from_dict(read_config_file(path))

    def has_connection_string(self) -> bool:
        return is_present(self.connection_string)

    def has_hub_name(self) -> bool:
        return is_present(self.hub_name)

    def has_device_id(self) -> bool:
        return is_present(self.device_id)

    def has_module_id(self) -> bool:
        return is_present(self.module_id)

    def has_shared_access_key(self) -> bool:
        return is_present(self.shared_access_key)

    def has_shared_access_key_name(self) -> bool:
        return is_present(self.shared_access_key_name)

    def is_valid(self) -> bool:
        """Return True if the configuration holds one of the usable credential combinations"""
        if self.has_connection_string():
            return True
        if self.has_hub_name() and self.has_shared_access_key():
            return self.has_shared_access_key_name() or self.has_device_id()
        return False


# Sanitization #


def _sanitize_string(key, value):
    if value is None:
        return ""
    if not isinstance(value, str):
        raise TypeError("Invalid type for '{}'. Must be a string.".format(key))
    return value


def _sanitize_bool(value):
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        lowered = value.strip().lower()
        if lowered in _true_strings:
            return True
        if lowered in _false_strings:
            return False
    raise ValueError("Invalid value for 'use_gateway'. Must be a boolean.")


def read_config_file(path):
    """Return the configuration values held by a JSON file

    :raises: OSError if the file cannot be read
    :raises: ValueError if the file does not contain a JSON object
    """
    with io.open(path, mode="r", encoding="utf-8") as config_file:
        try:
            values = json.load(config_file)
        except ValueError as e:
            raise ValueError("Invalid configuration file - Unable to parse JSON") from e
    if not isinstance(values, dict):
        raise ValueError("Invalid configuration file - Expected a JSON object")
    logger.debug("Loaded output configuration from {}".format(path))
    return values
