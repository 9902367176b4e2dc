# src/ampify/errors.py


class AmpifyError(Exception):
    """Base class for every failure that aborts a build."""


class LoadError(AmpifyError):
    """The source document could not be read."""


class ParseError(AmpifyError):
    """The source document is not usable markup."""


class DataError(AmpifyError):
    """A structured-data block does not contain valid JSON."""


class StyleCompileError(AmpifyError):
    """The stylesheet could not be read, configured or transformed."""


class MinifyError(AmpifyError):
    """The serialized document could not be minified."""


class WriteError(AmpifyError):
    """The output document could not be written."""


class ConfigError(AmpifyError):
    """The configuration holds a value the build cannot use."""
