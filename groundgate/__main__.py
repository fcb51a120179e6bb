"""
Allow running GroundGate as a module: ``python -m groundgate``.

This delegates to the CLI entry point so that both
``groundgate`` (console script) and ``python -m groundgate``
behave identically.
"""

from groundgate.cli import main

if __name__ == "__main__":
    main()
