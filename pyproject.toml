[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "meshcheck"
version = "0.1.0"
description = "Helpers for end-to-end service mesh tests: retries, HTTP request options, manifest templates and version checks."
requires-python = ">=3.10"
keywords = ["testing", "service-mesh", "istio", "retry", "templates"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Developers",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Software Development :: Testing",
]
dependencies = [
    "jinja2",
    "pyyaml",
    "requests",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["meshcheck"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
