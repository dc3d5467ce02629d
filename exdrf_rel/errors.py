class ConfigurationError(ValueError):
    """The field was declared with invalid options.

    This indicates a programming error in the resource definition and is
    never caught by this package.
    """


class SchemaError(ConfigurationError):
    """The schema cannot describe the relation named by a field."""
