"""Allow ``python -m gamecard.app``."""

import sys

from .main import main

sys.exit(main())
