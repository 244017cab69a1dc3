#!/usr/bin/env python3
import re
from pathlib import Path

PYPROJECT_PATH = Path("pyproject.toml")
INIT_PATH = Path("veeam_job_sensor/__init__.py")

VERSION_RE = re.compile(r'^(version\s*=\s*)"(\d+\.\d+\.\d+)"', re.MULTILINE)
INIT_VERSION_RE = re.compile(r'^(__version__\s*=\s*)"(\d+\.\d+\.\d+)"', re.MULTILINE)

def bump_version(version: str) -> str:
    major, minor, patch = map(int, version.split("."))
    patch += 1
    return f"{major}.{minor}.{patch}"

def read_version(path: Path = PYPROJECT_PATH) -> str:
    match = VERSION_RE.search(path.read_text())
    return match.group(2) if match else "0.0.0"

def update_pyproject(new_version: str, path: Path = PYPROJECT_PATH):
    text = path.read_text()
    path.write_text(VERSION_RE.sub(rf'\g<1>"{new_version}"', text, count=1))

def update_init(new_version: str, path: Path = INIT_PATH):
    if not path.exists():
        return
    text = path.read_text()
    path.write_text(INIT_VERSION_RE.sub(rf'\g<1>"{new_version}"', text, count=1))

def main():
    new_version = bump_version(read_version())
    update_pyproject(new_version)
    update_init(new_version)
    print(new_version)

if __name__ == "__main__":
    main()
