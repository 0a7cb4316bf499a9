[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "alpacawire"
version = "0.1.0"
description = "Compact binary serialization of dataclass records with varint integers, optional version stamps and CRC-32 checksums"
requires-python = ">=3.10"
dependencies = []
keywords = ["serialization", "binary", "varint", "crc32", "dataclass", "codec"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["alpacawire"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"
