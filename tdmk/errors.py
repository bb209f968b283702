"""Exception hierarchy for problem generation and (de)serialization.

Format errors subclass ``ValueError`` so callers that only care about
"bad input" can catch them together with plain parse failures. I/O errors
are never wrapped.
"""


class TdmkError(Exception):
    """Base class for all errors raised by the package."""


class ProblemFormatError(TdmkError, ValueError):
    """A problem file (or input parameter set) violates the expected format."""


class CodomainFormatError(TdmkError, ValueError):
    """A codomain file or codomain function descriptor could not be read."""


class ConfigurationError(TdmkError, ValueError):
    """A problem generation configuration file is malformed."""


class StructuredCodecError(TdmkError):
    """Structured (YAML) serialization or deserialization failed."""


class FolderPairingError(TdmkError, AssertionError):
    """Codomain and problem folders do not hold the same number of files."""
