"""readmesync executable module.

Error handling lives in cli.main(), the console script entry point; this
module only serves `python -m readmesync` and delegates immediately.
"""

from __future__ import annotations

import sys

from .cli import main


if __name__ == "__main__":
    sys.exit(main())
