from __future__ import annotations

import sys

from qdir.main import main

sys.exit(main())
