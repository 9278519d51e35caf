# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

import pytest
import logging
import json
from iothub_output.serializer import JsonSerializer
from iothub_output.exceptions import SerializationError
from iothub_output.models import Metric

logging.basicConfig(level=logging.DEBUG)


@pytest.mark.describe("JsonSerializer - Instantiation")
class TestJsonSerializerInstantiation(object):
    @pytest.mark.it("Truncates the timestamp units to a power of ten nanoseconds")
    @pytest.mark.parametrize(
        "timestamp_units, expected_units_ns",
        [
            pytest.param(1, 1000000000, id="Seconds"),
            pytest.param(0.001, 1000000, id="Milliseconds"),
            pytest.param(0.0015, 1000000, id="1.5 milliseconds"),
            pytest.param(0.000001, 1000, id="Microseconds"),
            pytest.param(1e-9, 1, id="Nanoseconds"),
            pytest.param(60, 10000000000, id="Minutes"),
        ],
    )
    def test_truncates_units(self, timestamp_units, expected_units_ns):
        serializer = JsonSerializer(timestamp_units=timestamp_units)
        assert serializer.timestamp_units_ns == expected_units_ns

    @pytest.mark.it("Defaults to one second timestamp units")
    @pytest.mark.parametrize(
        "kwargs",
        [
            pytest.param({}, id="Not provided"),
            pytest.param({"timestamp_units": 0}, id="Zero"),
            pytest.param({"timestamp_units": -1}, id="Negative"),
        ],
    )
    def test_default_units(self, kwargs):
        assert JsonSerializer(**kwargs).timestamp_units_ns == 1000000000


@pytest.mark.describe("JsonSerializer - .serialize()")
class TestJsonSerializerSerialize(object):
    @pytest.mark.it("Serializes the metric as a compact JSON object with sorted keys and a newline")
    def test_serializes_metric(self, metric):
        serializer = JsonSerializer()

        payload = serializer.serialize(metric)

        assert payload == (
            b'{"fields":{"online":true,"usage_idle":98.5,"usage_user":1},'
            b'"name":"cpu","tags":{"cpu":"cpu-total","host":"edge-01"},"timestamp":1700000000}\n'
        )

    @pytest.mark.it("Expresses the timestamp in the configured units")
    @pytest.mark.parametrize(
        "timestamp_units, expected_timestamp",
        [
            pytest.param(1, 1700000000, id="Seconds"),
            pytest.param(0.001, 1700000000123, id="Milliseconds"),
            pytest.param(1e-9, 1700000000123456789, id="Nanoseconds"),
        ],
    )
    def test_timestamp_units(self, metric, timestamp_units, expected_timestamp):
        serializer = JsonSerializer(timestamp_units=timestamp_units)

        obj = json.loads(serializer.serialize(metric))

        assert obj["timestamp"] == expected_timestamp

    @pytest.mark.it("Drops NaN and infinite field values")
    def test_drops_special_floats(self):
        metric = Metric(
            name="sensor",
            fields={"nan": float("nan"), "inf": float("inf"), "ninf": float("-inf"), "ok": 1.5},
            time=0,
        )
        serializer = JsonSerializer()

        obj = json.loads(serializer.serialize(metric))

        assert obj["fields"] == {"ok": 1.5}

    @pytest.mark.it("Raises SerializationError if the metric cannot be serialized")
    def test_raises_on_bad_metric(self, metric):
        metric.fields["bad"] = object()
        serializer = JsonSerializer()

        with pytest.raises(SerializationError) as e_info:
            serializer.serialize(metric)
        assert isinstance(e_info.value.__cause__, TypeError)

    @pytest.mark.it("Raises SerializationError if given something that is not a metric")
    def test_raises_on_not_a_metric(self):
        serializer = JsonSerializer()

        with pytest.raises(SerializationError):
            serializer.serialize("cpu usage_idle=98.5")


@pytest.mark.describe("JsonSerializer - .serialize_batch()")
class TestJsonSerializerSerializeBatch(object):
    @pytest.mark.it("Serializes the metrics as a list under the 'metrics' key")
    def test_serializes_batch(self, metrics):
        serializer = JsonSerializer()

        payload = serializer.serialize_batch(metrics)

        assert payload.endswith(b"\n")
        obj = json.loads(payload)
        assert list(obj.keys()) == ["metrics"]
        assert obj["metrics"] == [
            {
                "fields": {"online": True, "usage_idle": 98.5, "usage_user": 1},
                "name": "cpu",
                "tags": {"cpu": "cpu-total", "host": "edge-01"},
                "timestamp": 1700000000,
            },
            {
                "fields": {"used_percent": 41.0},
                "name": "mem",
                "tags": {"host": "edge-01"},
                "timestamp": 1700000001,
            },
        ]

    @pytest.mark.it("Serializes an empty batch as an empty list")
    def test_empty_batch(self):
        assert JsonSerializer().serialize_batch([]) == b'{"metrics":[]}\n'

    @pytest.mark.it("Raises SerializationError if any metric in the batch cannot be serialized")
    def test_raises_on_bad_metric(self, metrics):
        metrics[1].fields["bad"] = {1, 2}
        serializer = JsonSerializer()

        with pytest.raises(SerializationError):
            serializer.serialize_batch(metrics)

    @pytest.mark.it("Raises SerializationError if the batch is not iterable")
    def test_raises_on_not_iterable(self):
        with pytest.raises(SerializationError):
            JsonSerializer().serialize_batch(None)
