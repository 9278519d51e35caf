# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
"""Run the IoT Hub output as an external process.

The metrics agent writes metrics to the standard input of this process, one JSON document
per line. Each line holds either a single metric or a batch of the form {"metrics": [...]},
and is forwarded to IoT Hub as one telemetry message.
"""

import argparse
import json
import logging
import sys
from . import config as output_config
from . import constant
from .config import OutputConfig
from .models import Metric
from .output import IoTHubOutput

logger = logging.getLogger(__name__)

_string_options = [
    output_config.CONNECTION_STRING,
    output_config.HUB_NAME,
    output_config.DEVICE_ID,
    output_config.MODULE_ID,
    output_config.SHARED_ACCESS_KEY,
    output_config.SHARED_ACCESS_KEY_NAME,
]


def parse_args(argv=None):
    parser = argparse.ArgumentParser(
        prog="iothub_output", description=constant.OUTPUT_DESCRIPTION
    )
    parser.add_argument("--config", type=str, help="JSON file holding the output configuration.")
    for option in _string_options:
        parser.add_argument(
            "--" + option.replace("_", "-"),
            dest=option,
            type=str,
            help="Overrides '{}' from the configuration file.".format(option),
        )
    parser.add_argument(
        "--use-gateway",
        dest=output_config.USE_GATEWAY,
        action="store_true",
        default=None,
        help="Route traffic through the IoT Edge gateway.",
    )
    parser.add_argument(
        "--timestamp-units",
        type=float,
        default=constant.DEFAULT_TIMESTAMP_UNITS,
        help="Duration in seconds of one unit of the incoming timestamps. Default is 1.",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Logging level. Default is WARNING.",
    )
    return parser.parse_args(argv)


def build_config(args):
    """Merge the configuration file with the options given on the command line"""
    values = {}
    if args.config:
        values = output_config.read_config_file(args.config)
    for option in _string_options + [output_config.USE_GATEWAY]:
        value = getattr(args, option)
        if value is not None:
            values[option] = value
    return OutputConfig.from_dict(values)


def parse_line(line, timestamp_units=constant.DEFAULT_TIMESTAMP_UNITS):
    """Return the metrics held by one line of input

    :raises: ValueError if the line is not a metric or a batch of metrics
    :raises: TypeError if a metric holds a value of an unsupported type
    """
    obj = json.loads(line)
    if isinstance(obj, dict) and "metrics" in obj:
        objs = obj["metrics"]
        if not isinstance(objs, list):
            raise ValueError("'metrics' must be a list")
    else:
        objs = [obj]
    return [Metric.from_dict(o, timestamp_units=timestamp_units) for o in objs]


def run(output, stream, timestamp_units=constant.DEFAULT_TIMESTAMP_UNITS):
    """Forward every line of the stream to the output until the stream is exhausted

    :returns: The number of lines that could not be forwarded
    """
    failures = 0
    for line_number, line in enumerate(stream, start=1):
        if not line.strip():
            continue
        try:
            metrics = parse_line(line, timestamp_units=timestamp_units)
        except (ValueError, TypeError) as e:
            logger.error("Skipping malformed input on line {}: {}".format(line_number, e))
            failures += 1
            continue
        try:
            output.write(metrics)
        except Exception as e:
            logger.error("Failed to write metrics from line {}: {}".format(line_number, e))
            failures += 1
    return failures


def main(argv=None, stdin=None):
    args = parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if stdin is None:
        stdin = sys.stdin

    try:
        output = IoTHubOutput(build_config(args))
    except (OSError, ValueError, TypeError) as e:
        logger.error("Invalid configuration: {}".format(e))
        return 1

    try:
        output.init()
        output.connect()
    except Exception:
        logger.exception("Unable to start the IoT Hub output")
        output.close()
        return 1

    try:
        failures = run(output, stdin, timestamp_units=args.timestamp_units)
        if failures:
            logger.warning("{} line(s) could not be forwarded".format(failures))
    except KeyboardInterrupt:
        logger.info("Interrupted - shutting down")
    finally:
        output.close()
    return 0
