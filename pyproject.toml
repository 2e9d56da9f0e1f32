[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "gravlab"
version = "0.5.0"
description = "Describe Jupyter Lab workstation environments for ARM cloud instances and tunnel to them"
requires-python = ">=3.10"
keywords = ["jupyter", "jupyterlab", "cloud", "graviton", "ec2", "requirements", "ssh-tunnel", "session-manager"]
classifiers = [
    "Development Status :: 4 - Beta",
    "Environment :: Console",
    "Intended Audience :: Science/Research",
    "Intended Audience :: System Administrators",
    "Operating System :: POSIX",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: System :: Systems Administration",
    "Topic :: Scientific/Engineering",
]
dependencies = [
    "pyyaml",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[project.scripts]
gravlab = "gravlab.cli:main"

[tool.hatch.build.targets.wheel]
packages = ["gravlab"]

[tool.pytest.ini_options]
addopts = "-ra"

[tool.ruff]
line-length = 100
target-version = "py310"

[tool.ruff.lint]
select = ["E", "F", "W", "I", "B", "UP"]

[tool.mypy]
python_version = "3.10"
warn_unused_ignores = true
warn_redundant_casts = true
