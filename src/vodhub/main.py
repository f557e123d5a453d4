"""Main entry point for the vodhub CLI.

Usage:
    python -m vodhub.main --help
    vodhub --help  # If installed via pip/uv
"""

from vodhub.cli import main

if __name__ == "__main__":
    main()
