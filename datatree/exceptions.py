"""
Custom exceptions for the DataTree package.
"""


class DataTreeError(Exception):
    """Base exception for all DataTree-related errors."""
    pass


class DuplicateNodeError(DataTreeError):
    """Raised when incoming data would overwrite an existing node id."""

    def __init__(self, node_ids, message=None):
        self.node_ids = list(node_ids)
        super().__init__(
            message
            or f"Node id(s) already present in the index: {', '.join(map(repr, self.node_ids))}"
        )


class ConfigurationError(DataTreeError):
    """Raised when there's a configuration or input file issue."""
    pass
