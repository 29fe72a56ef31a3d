"""Entry-point for ``python -m pr_tracker``."""

from __future__ import annotations

import sys

from pr_tracker.runner import main

if __name__ == "__main__":
    sys.exit(main())
