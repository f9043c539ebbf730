"""
Entry point for running LuidGPT as a module.

This allows users to run the CLI using:
    python -m luidgpt [command] [options]
"""

from luidgpt.cli.app import main

if __name__ == "__main__":
    main()
