# --------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains tools for working with the IoT Edge runtime the output may be deployed under"""

import logging
import os
import urllib.parse
from typing import Mapping, Optional
import requests
import requests_unixsocket
from . import constant
from . import product_info
from .exceptions import IoTEdgeError

requests_unixsocket.monkeypatch()
logger = logging.getLogger(__name__)


class EdgeEnvironment(object):
    """Values placed in the module container's environment by the IoT Edge runtime.

    Every value is optional. Outside of an IoT Edge deployment they are all None.
    """

    def __init__(
        self,
        gateway_host_name: Optional[str] = None,
        module_generation_id: Optional[str] = None,
        workload_uri: Optional[str] = None,
        module_id: Optional[str] = None,
        api_version: Optional[str] = None,
    ) -> None:
        self.gateway_host_name = gateway_host_name
        self.module_generation_id = module_generation_id
        self.workload_uri = workload_uri
        self.module_id = module_id
        self.api_version = api_version

    @classmethod
    def from_environ(cls, environ: Optional[Mapping[str, str]] = None) -> "EdgeEnvironment":
        """Capture the IoT Edge values from the process environment

        :param environ: Mapping to read from instead of os.environ
        """
        if environ is None:
            environ = os.environ
        return cls(
            gateway_host_name=_get_env_value(environ, constant.EDGE_GATEWAY_HOST_NAME_ENV),
            module_generation_id=_get_env_value(environ, constant.EDGE_MODULE_GENERATION_ID_ENV),
            workload_uri=_get_env_value(environ, constant.EDGE_WORKLOAD_URI_ENV),
            module_id=_get_env_value(environ, constant.EDGE_MODULE_ID_ENV),
            api_version=_get_env_value(environ, constant.EDGE_API_VERSION_ENV),
        )

    def has_gateway(self) -> bool:
        return self.gateway_host_name is not None

    def has_workload(self) -> bool:
        return self.workload_uri is not None


class EdgeWorkloadClient(object):
    """
    Client for the IoT Edge workload API.

    The workload API is served by the IoT Edge runtime, usually over a Unix domain socket,
    and hands out the trust bundle: the certificate that can be used as a trusted cert
    to authenticate the TLS connection between the module and the IoT Edge gateway.
    """

    def __init__(self, workload_uri: str, api_version: Optional[str] = None) -> None:
        """
        Initializer for EdgeWorkloadClient

        :param str workload_uri: The workload uri, as found in IOTEDGE_WORKLOADURI
        :param str api_version: The workload API version. Defaults to 2019-01-30
        """
        self.workload_uri = _format_socket_uri(workload_uri)
        self.api_version = api_version or constant.EDGE_DEFAULT_API_VERSION

    def get_trust_bundle(self) -> str:
        """Fetch the PEM certificate the IoT Edge gateway presents for TLS

        :raises: IoTEdgeError if the certificate cannot be retrieved
        """
        response = requests.get(
            self.workload_uri + "trust-bundle",
            params={"api-version": self.api_version},
            headers={"User-Agent": urllib.parse.quote_plus(product_info.get_output_user_agent())},
        )
        try:
            response.raise_for_status()
            bundle = response.json()
            certificate = bundle["certificate"]
        except requests.exceptions.HTTPError as e:
            raise IoTEdgeError("Unable to get trust bundle from IoT Edge") from e
        except (KeyError, TypeError) as e:
            # Also covers a bundle that is not a JSON object
            raise IoTEdgeError("No certificate in trust bundle") from e
        except ValueError as e:
            raise IoTEdgeError("Unable to decode trust bundle") from e
        logger.debug("Retrieved trust bundle from IoT Edge")
        return certificate


def _get_env_value(environ, name):
    value = environ.get(name)
    if value is None or not value.strip():
        return None
    return value


def _format_socket_uri(workload_uri):
    """Convert an IOTEDGE_WORKLOADURI value into a base URL requests can use.

    "unix:///var/run/iotedge/workload.sock" becomes
    "http+unix://%2Fvar%2Frun%2Fiotedge%2Fworkload.sock/", the form requests_unixsocket
    understands. Other URIs are kept as they are. The result always ends with a slash.
    """
    if workload_uri.startswith("unix://"):
        socket_path = workload_uri[len("unix://") :].rstrip("/")
        workload_uri = "http+unix://" + urllib.parse.quote(socket_path, safe="")
    if not workload_uri.endswith("/"):
        workload_uri += "/"
    return workload_uri
