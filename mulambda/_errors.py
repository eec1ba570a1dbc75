class ConfigurationError(ValueError):
    """Raised for an invalid optimizer configuration before any generation is run."""
