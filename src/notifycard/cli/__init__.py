"""Command-line interface for notifycard."""
