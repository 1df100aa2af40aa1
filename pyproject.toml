[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tdswire"
version = "0.1.0"
description = "Encoders and decoders for the Tabular Data Stream (TDS) wire protocol"
requires-python = ">=3.10"
dependencies = []
keywords = ["tds", "sql server", "mssql", "protocol", "codec", "wire format"]
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
    "Topic :: Database :: Front-Ends",
    "Topic :: Software Development :: Libraries :: Python Modules",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tdswire"]

[tool.hatch.build.targets.sdist]
include = ["tdswire", "tests", "README.md"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
