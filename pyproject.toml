[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pawnamx"
version = "0.1.0"
description = "Read Pawn abstract machine (AMX) programs and their symbolic debug information"
requires-python = ">=3.10"
dependencies = []
keywords = ["pawn", "amx", "abstract machine", "debug information", "bytecode"]
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
    "Topic :: Software Development :: Debuggers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pawnamx"]

[tool.pytest.ini_options]
addopts = "-ra"
