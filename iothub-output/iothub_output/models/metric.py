# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""This module contains a class representing a telemetry record produced by the metrics agent.
"""
import math
import time as _time

NANOSECONDS_PER_SECOND = 1000000000

_field_types = (bool, int, float, str)


def truncate_units(timestamp_units):
    """Return the largest power of ten nanoseconds not exceeding the given unit (in seconds)"""
    units_ns = int(round(timestamp_units * NANOSECONDS_PER_SECOND))
    # Default precision is 1s
    if units_ns <= 0:
        return NANOSECONDS_PER_SECOND
    d = 1
    while d * 10 <= units_ns:
        d *= 10
    return d


class Metric(object):
    """Represents a single telemetry record

    :ivar name: The measurement name
    :ivar tags: Dictionary of string tags identifying the series
    :ivar fields: Dictionary of field values. Values can be int, float, bool or str
    :ivar time: Time of the measurement, in nanoseconds since the Unix epoch
    """

    def __init__(self, name, fields, tags=None, time=None):
        """
        Initializer for Metric

        :param str name: The measurement name
        :param dict fields: Field values of the measurement. At least one is required.
        :param dict tags: String tags identifying the series
        :param int time: Time of the measurement in nanoseconds since the Unix epoch.
            Defaults to the current time.

        :raises: TypeError if a name, tag or field is of an unsupported type
        :raises: ValueError if the name is empty or no fields are provided
        """
        if not isinstance(name, str):
            raise TypeError("Metric name must be of type str")
        if not name:
            raise ValueError("Metric name cannot be empty")
        if tags is None:
            tags = {}
        elif not isinstance(tags, dict):
            raise TypeError("Metric tags must be a dictionary")
        if fields is not None and not isinstance(fields, dict):
            raise TypeError("Metric fields must be a dictionary")
        for key, value in tags.items():
            if not isinstance(key, str) or not isinstance(value, str):
                raise TypeError("Metric tags must be str keys with str values")
        if not fields:
            raise ValueError("Metric must have at least one field")
        for key, value in fields.items():
            if not isinstance(key, str):
                raise TypeError("Metric field keys must be of type str")
            if not isinstance(value, _field_types):
                raise TypeError(
                    "Unsupported type for field '{}': {}".format(key, type(value).__name__)
                )
        if time is None:
            time = _time.time_ns()
        elif isinstance(time, bool) or not isinstance(time, int):
            raise TypeError("Metric time must be an integer number of nanoseconds")

        self.name = name
        self.tags = dict(tags)
        self.fields = dict(fields)
        self.time = time

    @classmethod
    def from_dict(cls, obj, timestamp_units=1.0):
        """Instantiate a Metric from an object in the serialized JSON shape

        :param dict obj: Object with 'name', 'fields', and optionally 'tags' and 'timestamp'
        :param float timestamp_units: Duration, in seconds, of one 'timestamp' unit. Truncated
            to a power of ten nanoseconds, like :class:`iothub_output.serializer.JsonSerializer`

        :raises: ValueError if 'name' or 'fields' is missing, or the timestamp is not finite
        :raises: TypeError if a value is of an unsupported type
        """
        if not isinstance(obj, dict):
            raise TypeError("Metric object must be a dictionary")
        try:
            name = obj["name"]
            fields = obj["fields"]
        except KeyError as e:
            raise ValueError("Metric object is missing '{}'".format(e.args[0])) from e
        timestamp = obj.get("timestamp")
        if timestamp is None:
            time = None
        elif isinstance(timestamp, bool) or not isinstance(timestamp, (int, float)):
            raise TypeError("Metric timestamp must be numeric")
        else:
            units_ns = truncate_units(timestamp_units)
            if isinstance(timestamp, int):
                time = timestamp * units_ns
            else:
                scaled = timestamp * units_ns
                if not math.isfinite(scaled):
                    raise ValueError("Metric timestamp must be finite")
                time = int(round(scaled))
        return cls(name=name, fields=fields, tags=obj.get("tags"), time=time)

    def __repr__(self):
        return "Metric(name={!r}, tags={!r}, fields={!r}, time={!r})".format(
            self.name, self.tags, self.fields, self.time
        )

    def __eq__(self, other):
        if not isinstance(other, Metric):
            return NotImplemented
        return (
            self.name == other.name
            and self.tags == other.tags
            and self.fields == other.fields
            and self.time == other.time
        )
