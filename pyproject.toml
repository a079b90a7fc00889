[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "dryopea"
version = "0.1.0"
description = "Definition tables, record store and runtime operators for a small scripting language interpreter"
requires-python = ">=3.10"
dependencies = []
keywords = ["interpreter", "language", "store", "records", "code-generation"]
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
    "Topic :: Software Development :: Interpreters",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["dryopea"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
