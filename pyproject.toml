[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pipestream"
version = "0.1.0"
description = "Building blocks for message stream processing: messages, metadata stores, pipes, monitors, queue and cache sinks, and Kafka offset metadata."
requires-python = ">=3.10"
dependencies = []
keywords = ["streams", "stream-processing", "pipeline", "kafka", "metadata", "commit", "offsets"]
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
    "Topic :: Software Development :: Libraries :: Application Frameworks",
    "Typing :: Typed",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["pipestream"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
