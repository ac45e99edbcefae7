[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "schedcheck"
version = "0.1.0"
description = "Scheduling strategies for systematic concurrency testing: DFS, random, PCT, round-robin and replay, with compact schedule encoding."
requires-python = ">=3.10"
dependencies = []
keywords = ["concurrency", "testing", "scheduler", "pct", "model-checking", "replay"]
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
    "Topic :: Software Development :: Testing",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[tool.hatch.build.targets.wheel]
packages = ["schedcheck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
strict = true
