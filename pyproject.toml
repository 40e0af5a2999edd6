[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "pointsbuilder"
version = "0.1.0"
description = "Build tables of secp256k1 points over a contiguous scalar range using batched affine addition, stored in SQLite."
requires-python = ">=3.10"
dependencies = []
keywords = [
    "secp256k1",
    "elliptic-curve",
    "batch-addition",
    "sqlite",
    "lookup-table",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Developers",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Security :: Cryptography",
    "Topic :: Scientific/Engineering :: Mathematics",
    "Topic :: Database",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
pointsbuilder = "pointsbuilder.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["pointsbuilder"]

[tool.hatch.build.targets.sdist]
include = ["pointsbuilder", "tests"]

[tool.pytest.ini_options]
addopts = "-ra"
testpaths = ["tests"]

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
