"""Run the flags calculator with ``python -m cpuflags``."""

import sys

from .main import main

sys.exit(main())
