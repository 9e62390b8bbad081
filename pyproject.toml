[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "metrics-util"
version = "0.1.0"
description = "Helper types for metrics: registries, recorder layers, atomic buckets, histograms and quantile summaries."
requires-python = ">=3.10"
dependencies = []
keywords = ["metrics", "telemetry", "histogram", "quantile", "registry", "recorder"]
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
    "Topic :: System :: Monitoring",
]

[project.optional-dependencies]
test = ["pytest", "hypothesis"]

[project.scripts]
bucket-crusher = "metrics_util.crusher:main"

[tool.hatch.build.targets.wheel]
packages = ["metrics_util"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
