[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "sctx"
version = "0.1.0"
description = "Service context, components, flags, structured logging and HTTP error helpers for building services"
requires-python = ">=3.10"
keywords = ["service", "context", "components", "flags", "logging", "errors", "flask"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Operating System :: OS Independent",
    "Framework :: Flask",
    "Topic :: Software Development :: Libraries :: Application Frameworks",
]
dependencies = [
    "python-dotenv",
    "flask",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["sctx"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
