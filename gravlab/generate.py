"""Derive an environment configuration from a local Python project."""

from __future__ import annotations

import json
import os
import re
import subprocess
from pathlib import Path
from typing import Iterable

from .environment import Environment

DEFAULT_INSTANCE_TYPE = "m7g.medium"

_PACKAGE_NAME = re.compile(r"^([a-zA-Z0-9_-]+)")
_IMPORT = re.compile(r"^(?:from\s+(\w+)|import\s+(\w+))", re.MULTILINE | re.ASCII)

_IMPORT_ALIASES = {
    "cv2": "opencv-python",
    "sklearn": "scikit-learn",
    "PIL": "Pillow",
    "torch": "torch",
    "tf": "tensorflow",
    "pd": "pandas",
    "np": "numpy",
    "plt": "matplotlib",
    "sns": "seaborn",
}

_COMMON_SCIENTIFIC = frozenset(
    {
        "numpy", "pandas", "matplotlib", "scipy",
        "scikit-learn", "seaborn", "plotly", "bokeh",
        "jupyter", "jupyterlab", "notebook", "ipywidgets",
        "torch", "tensorflow", "keras", "transformers",
        "requests", "beautifulsoup4", "lxml", "openpyxl",
    }
)

_SYSTEM = frozenset({"pip", "setuptools", "wheel", "pkg-resources"})

_KNOWN = frozenset(
    {
        "pandas", "numpy", "matplotlib", "seaborn",
        "plotly", "bokeh", "scipy", "scikit-learn",
        "requests", "beautifulsoup4", "lxml", "openpyxl",
        "boto3", "botocore", "sqlalchemy", "psycopg2",
        "torch", "tensorflow", "transformers", "datasets",
        "accelerate", "evaluate", "wandb", "tensorboard",
        "opencv", "Pillow", "imageio", "tqdm",
        "click", "flask", "fastapi", "streamlit",
    }
)

_ML_INSTANCE = frozenset({"torch", "tensorflow", "transformers", "datasets"})
_COMPUTE_INSTANCE = frozenset({"scipy", "scikit-learn", "opencv-python"})
_ML_STORAGE = frozenset({"torch", "tensorflow", "transformers"})
_DATA_STORAGE = frozenset({"opencv-python", "scipy", "scikit-learn"})

_COMMAND_ERRORS = (OSError, subprocess.SubprocessError, ValueError)


class RequirementsNotFound(LookupError):
    """No package requirements could be read from the given source."""


def clean_package_name(line: str) -> str:
    """Strip version specifiers and anything after the bare package name."""
    match = _PACKAGE_NAME.match(line)
    return match.group(1) if match else ""


def is_common_scientific_package(pkg: str) -> bool:
    """Whether a conda package is one of the common scientific ones."""
    return pkg in _COMMON_SCIENTIFIC


def is_system_package(pkg: str) -> bool:
    """Whether a package is packaging tooling rather than a dependency."""
    return pkg in _SYSTEM


def is_known_package(pkg: str) -> bool:
    """Whether an import name is a recognised installable package."""
    return pkg in _KNOWN


def suggest_instance_type(packages: Iterable[str]) -> str:
    """Pick an instance type suited to the detected packages."""
    names = set(packages)
    if names & _ML_INSTANCE:
        return "m7g.large"
    if names & _COMPUTE_INSTANCE:
        return "c7g.large"
    return DEFAULT_INSTANCE_TYPE


def suggest_ebs_size(packages: Iterable[str]) -> int:
    """Pick a root volume size in GB suited to the detected packages."""
    names = set(packages)
    if names & _ML_STORAGE:
        return 40
    if names & _DATA_STORAGE:
        return 25
    return 15


def parse_requirements(source: str | os.PathLike[str]) -> list[str]:
    """Read package names from a requirements file or a directory holding one."""
    path = Path(source)
    candidate = path / "requirements.txt" if path.is_dir() else path
    packages: list[str] = []
    try:
        with candidate.open(encoding="utf-8", errors="replace") as handle:
            for raw in handle:
                line = raw.strip()
                if not line or line.startswith("#"):
                    continue
                name = clean_package_name(line)
                if name:
                    packages.append(name)
    except OSError:
        pass
    if not packages:
        raise RequirementsNotFound(f"no requirements found in {source}")
    return packages


def _command_output(args: list[str]) -> str:
    result = subprocess.run(args, capture_output=True, check=True, text=True)
    return result.stdout


def analyze_conda_environment() -> list[str]:
    """List pip-installed or common scientific packages of the active conda env."""
    data = json.loads(_command_output(["conda", "list", "--json"]))
    if not isinstance(data, list):
        raise ValueError("unexpected conda list output")
    packages = []
    for entry in data:
        if not isinstance(entry, dict):
            raise ValueError("unexpected conda package entry")
        name = str(entry.get("name") or "")
        if entry.get("channel") == "pypi" or is_common_scientific_package(name):
            packages.append(name)
    return packages


def analyze_pip_environment() -> list[str]:
    """List packages reported by pip freeze, leaving out packaging tools."""
    packages = []
    for raw in _command_output(["pip", "freeze"]).splitlines():
        line = raw.strip()
        if not line:
            continue
        name = clean_package_name(line)
        if name and not is_system_package(name):
            packages.append(name)
    return packages


def _raise(error: OSError) -> None:
    raise error


def find_notebook_files(source: str | os.PathLike[str]) -> list[str]:
    """Return every .ipynb file under the source path, in walk order."""
    root = Path(source)
    if not root.exists():
        raise FileNotFoundError(f"no such file or directory: {source}")
    if not root.is_dir():
        return [str(root)] if str(root).endswith(".ipynb") else []
    notebooks = []
    for dirpath, dirnames, filenames in os.walk(root, onerror=_raise):
        dirnames.sort()
        notebooks.extend(
            os.path.join(dirpath, name) for name in sorted(filenames) if name.endswith(".ipynb")
        )
    return notebooks


def _notebook_imports(path: str) -> set[str]:
    """Top-level module names imported by a notebook's code cells.

    A notebook that cannot be read or does not have the expected shape
    contributes nothing.
    """
    try:
        notebook = json.loads(Path(path).read_bytes())
    except (OSError, ValueError):
        return set()
    if notebook is None:
        return set()
    if not isinstance(notebook, dict):
        return set()
    cells = notebook.get("cells") or []
    if not isinstance(cells, list):
        return set()

    code_lines: list[str] = []
    for cell in cells:
        if cell is None:
            continue
        if not isinstance(cell, dict):
            return set()
        cell_type = cell.get("cell_type")
        source = cell.get("source") or []
        if cell_type is not None and not isinstance(cell_type, str):
            return set()
        if not isinstance(source, list) or not all(isinstance(s, str) for s in source):
            return set()
        if cell_type == "code":
            code_lines.extend(source)

    found = set()
    for line in code_lines:
        for match in _IMPORT.finditer(line):
            found.update(name for name in match.groups() if name)
    return found


def extract_imports(notebooks: Iterable[str]) -> set[str]:
    """Collect module names imported by the code cells of the given notebooks."""
    imports: set[str] = set()
    for notebook in notebooks:
        imports |= _notebook_imports(notebook)
    return imports


def map_imports_to_packages(imports: Iterable[str]) -> list[str]:
    """Translate import names to installable package names, dropping unknown ones."""
    packages = []
    for name in sorted(set(imports)):
        if name in _IMPORT_ALIASES:
            packages.append(_IMPORT_ALIASES[name])
        elif is_known_package(name):
            packages.append(name)
    return packages


def scan_notebooks_for_imports(source: str | os.PathLike[str]) -> list[str]:
    """Find the packages imported by every notebook under the source path."""
    return map_imports_to_packages(extract_imports(find_notebook_files(source)))


def create_base_environment(name: str, instance_type: str) -> Environment:
    """Return the starting environment that detected packages are added to."""
    return Environment(
        name=name,
        instance_type=instance_type,
        ami_base="ubuntu22-arm64",
        ebs_volume_size=20,
        packages=["python3-pip", "python3-dev", "jupyter", "git", "htop", "awscli"],
        pip_packages=["jupyterlab", "notebook", "ipywidgets"],
        jupyter_extensions=["jupyterlab"],
        environment_vars={"PYTHONPATH": "/home/ubuntu/notebooks"},
    )


def collect_all_packages(source: str | os.PathLike[str], scan_notebooks: bool) -> set[str]:
    """Gather packages from requirements, conda, pip and optionally notebooks."""
    packages: set[str] = set()

    try:
        found = parse_requirements(source)
    except RequirementsNotFound:
        pass
    else:
        print(f"Found requirements.txt with {len(found)} packages")
        packages.update(found)

    try:
        found = analyze_conda_environment()
    except _COMMAND_ERRORS:
        pass
    else:
        print(f"Found conda environment with {len(found)} pip packages")
        packages.update(found)

    try:
        found = analyze_pip_environment()
    except _COMMAND_ERRORS:
        pass
    else:
        print(f"Found current pip environment with {len(found)} packages")
        packages.update(found)

    if scan_notebooks:
        try:
            found = scan_notebooks_for_imports(source)
        except OSError:
            pass
        else:
            print(f"Found {len(found)} unique imports from notebooks")
            packages.update(found)

    return packages


def optimize_environment(
    env: Environment, original_instance_type: str, packages: list[str]
) -> None:
    """Adjust instance type and volume size to suit the detected packages."""
    if original_instance_type == DEFAULT_INSTANCE_TYPE:
        env.instance_type = suggest_instance_type(packages)
        if env.instance_type != original_instance_type:
            print(f"Suggested instance type: {env.instance_type} (based on detected packages)")
    env.ebs_volume_size = suggest_ebs_size(packages)


def write_environment_file(
    env: Environment, output: str | os.PathLike[str], packages: list[str]
) -> Path:
    """Write the environment as YAML and report a summary."""
    path = Path(output)
    path.write_text(env.to_yaml(), encoding="utf-8")
    print(f"Generated environment config: {output}")
    print(f"Total packages: {len(packages)}")
    print(f"Instance type: {env.instance_type}")
    print(f"EBS volume: {env.ebs_volume_size}GB")
    return path


def generate(
    source: str | os.PathLike[str],
    output: str | os.PathLike[str] | None,
    name: str,
    instance_type: str,
    scan_notebooks: bool,
) -> Environment:
    """Analyse a local project and write an environment file for it."""
    if not output:
        output = f"{name}.yaml"
    print(f"Analyzing local environment from: {source}")

    env = create_base_environment(name, instance_type)
    packages = sorted(collect_all_packages(source, scan_notebooks))
    env.pip_packages.extend(packages)
    optimize_environment(env, instance_type, packages)
    write_environment_file(env, output, packages)
    return env