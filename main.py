#!/usr/bin/env python3
"""
StudyScribe - Entry point

Checks the Python version and launches the terminal application.

Usage:
    python3 main.py

Install the package first (pip install -e .) or use the `studyscribe`
console script it provides.
"""

import sys


# ============================================================================
# Constants
# ============================================================================

PYTHON_MIN_VERSION = (3, 9)


# ============================================================================
# Startup Checks
# ============================================================================

def check_python_version() -> None:
    """
    Validate that we're running on a supported Python version.

    Exits with error code 1 if version is insufficient.
    """
    if sys.version_info < PYTHON_MIN_VERSION:
        major, minor = PYTHON_MIN_VERSION
        current_major, current_minor = sys.version_info.major, sys.version_info.minor

        print(f"Error: Python {major}.{minor}+ is required")
        print(f"You are running: Python {current_major}.{current_minor}")
        print("\nPlease install a newer Python from:")
        print("https://www.python.org/downloads/")
        sys.exit(1)


# ============================================================================
# Main Application
# ============================================================================

def main() -> None:
    """
    Main application entry point.

    Imports happen after the version check so an old interpreter gets a
    readable message instead of a syntax error.
    """
    check_python_version()

    try:
        from studyscribe.cli import run_application

        run_application()

    except KeyboardInterrupt:
        print("\n\nInterrupted by user. Exiting...")
        sys.exit(0)
    except ImportError as e:
        print(f"\nMissing dependency: {e}")
        print("Install the project with: pip install -e .")
        sys.exit(1)
    except Exception as e:
        print(f"\nFatal error: {e}")
        import traceback
        traceback.print_exc()
        sys.exit(1)


if __name__ == "__main__":
    main()
