#!/usr/bin/env python3
"""
Dependency Verification Script
Imports every runtime and test dependency of talent-pathfinder and reports
which ones are missing, so a broken environment is found before a session.
"""

import sys
from importlib import import_module
from importlib.metadata import PackageNotFoundError, version

# (import name, distribution name)
DEPENDENCIES = [
    ("claude_agent_sdk", "claude-agent-sdk"),
    ("pydantic", "pydantic"),
    ("structlog", "structlog"),
    ("rich", "rich"),
    ("jinja2", "jinja2"),
    ("jsonschema", "jsonschema"),
    ("dotenv", "python-dotenv"),
    ("reportlab", "reportlab"),
    ("pyperclip", "pyperclip"),
    ("pytest", "pytest"),
    ("pytest_asyncio", "pytest-asyncio"),
    ("pytest_mock", "pytest-mock"),
    ("pypdf", "pypdf"),
]


def installed_version(distribution: str) -> str:
    try:
        return version(distribution)
    except PackageNotFoundError:
        return "unknown"


def verify_imports():
    """Import every dependency; exit 0 when all succeed, 1 otherwise."""
    failed = []

    print("Verifying dependencies...\n")

    for module_name, distribution in DEPENDENCIES:
        try:
            import_module(module_name)
        except ImportError as e:
            print(f"[FAILED] {distribution}: {e}")
            failed.append(distribution)
        else:
            print(f"[OK] {distribution} {installed_version(distribution)}")

    print(f"\n{'=' * 60}")

    if failed:
        print(f"[ERROR] {len(failed)} dependencies failed:")
        for name in failed:
            print(f"   - {name}")
        print("\nInstall with: pip install -e .[test]")
        sys.exit(1)

    print("[SUCCESS] All dependencies verified successfully!")
    sys.exit(0)


if __name__ == "__main__":
    verify_imports()
