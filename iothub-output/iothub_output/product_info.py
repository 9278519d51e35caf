# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module is for creating the product identifier sent along with IoT Hub and IoT Edge requests."""

import platform
from iothub_output.constant import VERSION, OUTPUT_IDENTIFIER

python_runtime = platform.python_version()
os_type = platform.system()
os_release = platform.version()
architecture = platform.machine()


def _get_common_user_agent():
    return "({python_runtime};{os_type} {os_release};{architecture})".format(
        python_runtime=python_runtime,
        os_type=os_type,
        os_release=os_release,
        architecture=architecture,
    )


def get_output_product_info():
    """
    Create the product info string appended to the IoT Hub client user agent
    """
    return "{output_iden}/{version}".format(output_iden=OUTPUT_IDENTIFIER, version=VERSION)


def get_output_user_agent():
    """
    Create the user agent for requests made directly by the output (e.g. to IoT Edge)
    """
    return "{product_info}{common}".format(
        product_info=get_output_product_info(), common=_get_common_user_agent()
    )
