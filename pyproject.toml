[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "fuelpak"
version = "0.1.0"
description = "Unpack and repack the object records stored in FUEL game archives"
requires-python = ">=3.10"
dependencies = []
keywords = ["fuel", "archive", "game-assets", "binary-format", "json", "dds", "wav"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: File Formats",
    "Topic :: Games/Entertainment",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["fuelpak"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
