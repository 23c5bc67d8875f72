"""Allow running as ``python -m vimarena``."""

import sys

from .cli import main

sys.exit(main())
