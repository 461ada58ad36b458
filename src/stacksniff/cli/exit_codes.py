"""Exit codes of the stacksniff CLI."""

EXIT_SUCCESS = 0
EXIT_CATALOG_ERROR = 2
EXIT_INVALID_USAGE = 3
