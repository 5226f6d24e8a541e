"""Allow ``python -m gitea_mirror``."""

from __future__ import annotations

import sys

from gitea_mirror.cli import main

sys.exit(main())
