"""Entry point for running cce as a module.

This allows running the application with:
    python -m cce [CCE FLAGS] [CLAUDE ARGS...]
"""

from cce.cli import main

if __name__ == "__main__":
    main()
