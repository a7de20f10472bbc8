"""
Exception hierarchy for SOSI-Rens.

Core operations are total over text input and do not raise for data-shape
reasons. The exceptions below cover the few hard failures: asking the codec
for a charset it does not support, handing the rewriter a selection that is
not structurally valid, and malformed configuration.
"""


class SosiRensError(Exception):
    """Root of the SOSI-Rens exception hierarchy."""


class UnsupportedCharsetError(SosiRensError, ValueError):
    """Raised when text is encoded to a charset identifier the codec does not know."""

    def __init__(self, charset):
        super().__init__(f"Unsupported charset: {charset!r}")
        self.charset = charset


class InvalidSelectionError(SosiRensError, ValueError):
    """Raised when persisted selection data does not have the expected shape."""


class ConfigError(SosiRensError):
    """Raised when an environment setting cannot be parsed."""
