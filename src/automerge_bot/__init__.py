"""automerge-bot - Drives labeled pull requests through checks to merge."""

__version__ = "0.1.0"
