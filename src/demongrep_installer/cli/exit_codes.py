"""Exit codes for the demongrep-install CLI.

- 0: Success
- 3: Invalid usage (bad arguments, invalid config file)
- 4: Bootstrap failure (any install stage failed)
- 130: Interrupted (Ctrl-C)
"""

from __future__ import annotations

EXIT_SUCCESS = 0
EXIT_INVALID_USAGE = 3
EXIT_BOOTSTRAP_FAILURE = 4
EXIT_INTERRUPTED = 130
