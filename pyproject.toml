[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mxclient"
version = "0.1.0"
description = "A client library for the Matrix Client-Server API"
requires-python = ">=3.10"
keywords = ["matrix", "chat", "client", "messaging", "sync"]
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
    "Topic :: Communications :: Chat",
    "Topic :: Software Development :: Libraries :: Python Modules",
]
dependencies = [
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
    "responses",
]

[tool.hatch.build.targets.wheel]
packages = ["mxclient"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
