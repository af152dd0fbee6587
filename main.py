"""
Presence Watch CLI Entrypoint.

Runs the installed ``presence-watch`` command from a source checkout:

    python main.py --source doorway.mp4 --output-mode save_json
"""

import sys

from presence_watch.cli import main

if __name__ == "__main__":
    sys.exit(main())
