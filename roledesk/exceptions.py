class ConfigurationError(RuntimeError):
    """Invalid route or app configuration. Raised while the app is being built."""


class DataIntegrityError(ValueError):
    """A stored record holds a value outside its allowed domain."""
