# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains the registry hosts use to look up outputs by name"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Creator = Callable[[], Any]

_outputs: Dict[str, Creator] = {}


def add(name: str, creator: Creator) -> None:
    """Register a factory that creates a new output instance

    :param str name: The name the output is configured under
    :param creator: Callable taking no arguments and returning a new output
    :raises: ValueError if an output is already registered under the name
    """
    if name in _outputs:
        raise ValueError("Output '{}' is already registered".format(name))
    _outputs[name] = creator
    logger.debug("Registered output '{}'".format(name))


def get(name: str) -> Creator:
    """Return the factory registered under the name

    :raises: KeyError if no output is registered under the name
    """
    return _outputs[name]


def names() -> List[str]:
    return sorted(_outputs)
