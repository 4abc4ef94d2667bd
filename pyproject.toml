[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "smoperator"
version = "0.1.0"
description = "Resource types and reconciliation logic for managing SageMaker jobs as Kubernetes custom resources"
requires-python = ">=3.10"
dependencies = []
keywords = ["kubernetes", "operator", "sagemaker", "reconciler", "custom-resources"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Developers",
    "Intended Audience :: System Administrators",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Distributed Computing",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["smoperator"]

[tool.pytest.ini_options]
addopts = "-ra"
