# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module decides where the IoT Hub output gets its credentials from"""

import enum
import logging
from typing import NamedTuple, Optional
from . import connection_string as cs
from .config import OutputConfig

logger = logging.getLogger(__name__)


class CredentialSource(enum.Enum):
    EXPLICIT_CONNECTION_STRING = "explicit_connection_string"
    DERIVED_FROM_PARTS = "derived_from_parts"
    FROM_ENVIRONMENT = "from_environment"


class ResolvedCredentials(NamedTuple):
    source: CredentialSource
    connection_string: Optional[str] = None


def resolve_credentials(config: OutputConfig) -> ResolvedCredentials:
    """Pick the credential source for a configuration.

    An explicit connection string wins and is used exactly as given. Otherwise a valid
    configuration has its connection string assembled from the configured parts. An invalid
    configuration leaves the IoT Edge environment as the only source.

    :param config: The output configuration
    :type config: :class:`iothub_output.OutputConfig`
    :returns: The chosen source, along with the connection string for that source (if any)
    :rtype: :class:`ResolvedCredentials`
    """
    if not config.is_valid():
        logger.debug("No usable credentials configured, deferring to the IoT Edge environment")
        return ResolvedCredentials(CredentialSource.FROM_ENVIRONMENT)

    if config.has_connection_string():
        return ResolvedCredentials(
            CredentialSource.EXPLICIT_CONNECTION_STRING, config.connection_string
        )

    connection_string = cs.build_connection_string(
        hub_name=config.hub_name,
        device_id=config.device_id,
        module_id=config.module_id,
        shared_access_key_name=config.shared_access_key_name,
        shared_access_key=config.shared_access_key,
    )
    return ResolvedCredentials(CredentialSource.DERIVED_FROM_PARTS, connection_string)
