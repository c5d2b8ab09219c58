#!/usr/bin/env python3
"""Site build script.

Runs the sitebuild CLI from a source checkout without installing the
package.
"""

from __future__ import annotations

import os
import sys

# Add the python source directory to the path for imports
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "..", "python"))

from sitebuild_core.cli import main  # noqa: E402

if __name__ == "__main__":
    sys.exit(main())
