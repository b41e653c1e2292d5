"""Allow ``python -m voxsprite``."""

import sys

from voxsprite.cli import main

sys.exit(main())
