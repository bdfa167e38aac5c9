#!/usr/bin/env python3
import os
import re
import sys

PYPROJECT = 'pyproject.toml'
PACKAGE_INIT = os.path.join('awsig', '__init__.py')

PYPROJECT_PATTERN = re.compile(r'^version = "([^"]+)"', re.MULTILINE)
INIT_PATTERN = re.compile(r'^__version__ = "([^"]+)"', re.MULTILINE)


def bump_version(current: str, bump_type: str) -> str:
    major, minor, patch = map(int, current.split('.'))
    if bump_type == 'major':
        return f"{major + 1}.0.0"
    elif bump_type == 'minor':
        return f"{major}.{minor + 1}.0"
    elif bump_type == 'patch':
        return f"{major}.{minor}.{patch + 1}"
    else:
        raise ValueError(f"Invalid bump type: {bump_type}")


def replace_version(content: str, pattern: 're.Pattern', new_version: str) -> str:
    """Swap the first version string matched by ``pattern`` for ``new_version``."""
    match = pattern.search(content)
    if not match:
        raise ValueError(f"No version found matching {pattern.pattern!r}")
    start, end = match.span(1)
    return content[:start] + new_version + content[end:]


def main():
    if len(sys.argv) != 2:
        print("Usage: bump_version.py <major|minor|patch>", file=sys.stderr)
        sys.exit(1)

    with open(PYPROJECT, 'r') as f:
        content = f.read()
    match = PYPROJECT_PATTERN.search(content)
    if not match:
        print(f"Error: Could not find version in {PYPROJECT}", file=sys.stderr)
        sys.exit(1)
    current_version = match.group(1)

    try:
        new_version = bump_version(current_version, sys.argv[1])
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    for path, pattern in ((PYPROJECT, PYPROJECT_PATTERN), (PACKAGE_INIT, INIT_PATTERN)):
        with open(path, 'r') as f:
            text = f.read()
        with open(path, 'w') as f:
            f.write(replace_version(text, pattern, new_version))

    # Output for GitHub Actions
    github_output = os.environ.get('GITHUB_OUTPUT')
    if github_output:
        with open(github_output, 'a') as f:
            f.write(f"current_version={current_version}\n")
            f.write(f"new_version={new_version}\n")
    else:
        print(f"Bumped version: {current_version} -> {new_version}")


if __name__ == '__main__':
    main()
