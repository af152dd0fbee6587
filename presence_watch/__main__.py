"""Allow ``python -m presence_watch``."""

import sys

from presence_watch.cli import main

sys.exit(main())
