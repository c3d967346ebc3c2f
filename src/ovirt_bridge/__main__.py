"""Entry point for running ovirt-bridge as a module.

This allows running the CLI with:
    python -m ovirt_bridge
"""

from ovirt_bridge.cli.main import main

if __name__ == "__main__":
    main()
