[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "mutscan"
version = "0.1.0"
description = "Call point mutations from SAM alignments, convert VCF records to CSV and score call accuracy"
requires-python = ">=3.10"
dependencies = []
keywords = ["bioinformatics", "sam", "vcf", "fasta", "variant-calling", "mutations", "cigar"]
classifiers = [
    "Development Status :: 3 - Alpha",
    "Intended Audience :: Science/Research",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Bio-Informatics",
]

[project.optional-dependencies]
test = ["pytest"]

[project.scripts]
mutscan-call = "mutscan.caller:main"
mutscan-accuracy = "mutscan.accuracy:main"
mutscan-convert = "mutscan.converter:main"

[tool.hatch.build.targets.wheel]
packages = ["mutscan"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"

[tool.ruff]
line-length = 88
target-version = "py310"

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
