"""Allow ``python -m fwmatrix``."""

import sys

from fwmatrix.cli import main


sys.exit(main())
