"""Allow running Dropstitch with ``python -m dropstitch``."""

import sys

from dropstitch.cli.main import main

sys.exit(main())
