[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "rbsemantic"
version = "0.1.0"
description = "Semantic analysis for Ruby syntax trees: symbol collection, scoping and type inference"
requires-python = ">=3.10"
dependencies = []
keywords = ["ruby", "semantic-analysis", "type-inference", "compiler", "symbol-table"]
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
    "Topic :: Software Development :: Compilers",
]

[project.optional-dependencies]
test = ["pytest"]

[tool.hatch.build.targets.wheel]
packages = ["rbsemantic"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
