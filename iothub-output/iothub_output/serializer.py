# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module converts metrics into JSON telemetry payloads"""

import json
import logging
import math
from . import constant
from .exceptions import SerializationError
from .models import truncate_units

logger = logging.getLogger(__name__)


class JsonSerializer(object):
    """Serializes metrics into JSON documents.

    A single metric serializes as::

        {"fields":{"usage":1.5},"name":"cpu","tags":{"host":"a"},"timestamp":1700000000}

    and a batch as ``{"metrics":[...]}``. Each document ends with a newline.
    """

    def __init__(self, timestamp_units=constant.DEFAULT_TIMESTAMP_UNITS):
        """Initializer for JsonSerializer

        :param float timestamp_units: Duration, in seconds, of one unit of the serialized
            timestamp. Truncated to a power of ten nanoseconds. Defaults to 1 second.
        """
        self.timestamp_units_ns = truncate_units(timestamp_units)

    def serialize(self, metric):
        """Serialize a single metric

        :param metric: The metric to serialize
        :type metric: :class:`iothub_output.models.Metric`
        :returns: The UTF-8 encoded JSON document
        :rtype: bytes
        :raises: SerializationError if the metric cannot be serialized
        """
        try:
            return self._dump(self._create_object(metric))
        except SerializationError:
            raise
        except Exception as e:
            raise SerializationError("Unable to serialize metric") from e

    def serialize_batch(self, metrics):
        """Serialize a batch of metrics into a single document

        :param list metrics: The metrics to serialize
        :returns: The UTF-8 encoded JSON document
        :rtype: bytes
        :raises: SerializationError if any of the metrics cannot be serialized
        """
        try:
            objects = [self._create_object(metric) for metric in metrics]
            return self._dump({"metrics": objects})
        except SerializationError:
            raise
        except Exception as e:
            raise SerializationError("Unable to serialize metric batch") from e

    def _create_object(self, metric):
        fields = {}
        for key, value in metric.fields.items():
            # JSON does not support these special values
            if isinstance(value, float) and (math.isnan(value) or math.isinf(value)):
                logger.debug(
                    "Dropping field '{}' of metric '{}': {}".format(key, metric.name, value)
                )
                continue
            fields[key] = value
        return {
            "fields": fields,
            "name": metric.name,
            "tags": dict(metric.tags),
            "timestamp": metric.time // self.timestamp_units_ns,
        }

    def _dump(self, obj):
        serialized = json.dumps(obj, sort_keys=True, separators=(",", ":"), allow_nan=False)
        return (serialized + "\n").encode(constant.TELEMETRY_CONTENT_ENCODING)
