"""Replace highlighted Azure Blob Storage URIs with SAS URLs."""

__version__ = "0.1.0"
