[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "tpccbench"
version = "0.1.0"
description = "TPC-C building blocks: initial data generation and load, the five transactions, and consistency checks"
requires-python = ">=3.10"
dependencies = []
keywords = ["tpc-c", "benchmark", "database", "oltp", "workload"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Database",
    "Topic :: System :: Benchmark",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["tpccbench"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
