[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "motodevice"
version = "0.1.0"
description = "Device support utilities: message queues, timers, GNSS target detection, location logging, config parsing, lights, power profiles and filesystem permissions"
requires-python = ">=3.10"
dependencies = []
keywords = ["android", "sysfs", "gnss", "message-queue", "timer", "lights", "power", "fs-config"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: POSIX :: Linux",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Hardware",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["motodevice"]

[tool.pytest.ini_options]
addopts = "-ra"
