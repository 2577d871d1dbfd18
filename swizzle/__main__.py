"""Allow ``python -m swizzle``."""

import sys

from swizzle.cli import main

sys.exit(main())
