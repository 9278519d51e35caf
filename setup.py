# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------

from setuptools import setup, find_packages
import re

with open("README.md", "r") as fh:
    _long_description = fh.read()


filename = "iothub-output/iothub_output/constant.py"
version = None

with open(filename, "r") as fh:
    if not re.search("\n+VERSION", fh.read()):
        raise ValueError("VERSION  is not defined in constants.")

with open(filename, "r") as fh:
    for line in fh:
        if re.search("^VERSION", line):
            constant, value = line.strip().split("=")
            if not value:
                raise ValueError("Value for VERSION not defined in constants.")
            else:
                # Strip whitespace and quotation marks
                version = str(value.strip(' "'))
            break

setup(
    name="iothub-output",
    version=version,
    description="Metrics agent output for Azure IoT Hub and Azure IoT Edge",
    license="MIT License",
    license_files=("LICENSE",),
    long_description=_long_description,
    long_description_content_type="text/markdown",
    classifiers=[
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "Topic :: System :: Monitoring",
        "License :: OSI Approved :: MIT License",
        "Programming Language :: Python",
        "Programming Language :: Python :: 3",
        "Programming Language :: Python :: 3.8",
        "Programming Language :: Python :: 3.9",
        "Programming Language :: Python :: 3.10",
        "Programming Language :: Python :: 3.11",
        "Programming Language :: Python :: 3.12",
    ],
    install_requires=[
        # Define sub-dependencies due to pip dependency resolution bug
        # https://github.com/pypa/pip/issues/988
        "urllib3>=2.2.2,<3.0.0",
        # Actual project dependencies
        "azure-iot-device>=2.12.0,<3.0.0",
        "requests>=2.32.3,<3.0.0",
        "requests-unixsocket2>=0.4.1",
        "typing_extensions",
    ],
    extras_require={"test": ["pytest", "pytest-mock", "pytest-testdox"]},
    python_requires=">=3.8, <4",
    packages=find_packages(where="iothub-output"),
    package_dir={"": "iothub-output"},
    zip_safe=False,
)
