[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "polyref"
version = "0.1.0"
description = "Core data model for validating cross-artifact refactorings: validated ids, outcomes, evidence, migration maps and fail-closed validation reports."
requires-python = ">=3.10"
dependencies = []
keywords = ["refactoring", "validation", "migration", "canonical-json", "evidence"]
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
    "Topic :: Software Development :: Quality Assurance",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["polyref"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
