[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "trust_score"
version = "0.1.0"
description = "Trust score generators and reputation tracking for event-protocol interactions"
requires-python = ">=3.10"
dependencies = []
keywords = ["trust", "reputation", "witness", "event-protocol", "verdict"]
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
    "Topic :: Software Development :: Libraries",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["trust_score"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
