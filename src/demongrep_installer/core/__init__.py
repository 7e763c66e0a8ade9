"""Core models, errors, logging and reporting for demongrep-installer."""
