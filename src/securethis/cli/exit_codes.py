"""Exit codes for the securethis CLI.

- 0: Success (no issues found, or a default config file was just created)
- 1: Issues found in the scan results
- 2: Scanner error (container failed to start or exited non-zero)
- 3: Invalid usage (bad arguments, invalid config, no project root)
- 4: Packaging error (bundled scanner base config missing or broken)
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_ISSUES_FOUND = 1
EXIT_SCANNER_ERROR = 2
EXIT_INVALID_USAGE = 3
EXIT_PACKAGING_ERROR = 4
