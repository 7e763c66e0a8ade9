"""Allow ``python -m demongrep_installer``."""

from demongrep_installer.cli import main

if __name__ == "__main__":  # pragma: no cover - exercised via console script
    raise SystemExit(main())
