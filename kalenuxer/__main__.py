"""
Entry point for running Kalenuxer as a module.

Usage:
    python -m kalenuxer [command] [options]

Example:
    python -m kalenuxer prepare mysite --base test
    python -m kalenuxer release mysite --obf
    python -m kalenuxer times reset mysite css
"""

from kalenuxer_cli.main import cli

if __name__ == "__main__":
    cli()
