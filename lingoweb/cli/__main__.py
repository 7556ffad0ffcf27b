"""Allow running CLI as: python -m lingoweb.cli"""

import sys

from .main import main

sys.exit(main())
