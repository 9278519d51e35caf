"""IoT Hub Output Models

This package provides object models for use within the IoT Hub output.
"""

from .metric import Metric, truncate_units  # noqa: F401
