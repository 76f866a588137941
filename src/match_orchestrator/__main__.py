"""Allow running as: python -m match_orchestrator"""

import sys

from .cli import main

sys.exit(main())
