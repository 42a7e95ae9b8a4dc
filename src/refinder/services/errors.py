"""Service-layer exceptions."""


class BootstrapError(Exception):
    """Raised when the initial profile or session pass cannot complete."""
