"""demongrep-installer - bootstrap the pre-built demongrep binary."""

__version__ = "1.0.0"
