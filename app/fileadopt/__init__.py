"""fileadopt - reconcile a public file tree against a managed-file registry."""

__version__ = "0.1.0"
