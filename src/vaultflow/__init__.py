"""vaultflow: import a notes vault into a document store."""

__version__ = "0.3.0"
