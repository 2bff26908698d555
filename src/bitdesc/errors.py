"""
Descriptor parsing errors
"""


class DescriptorError(ValueError):
    """
    Base class for all errors raised while validating descriptor fragments
    """

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def __str__(self):
        return f"Parsing error: {self.message}"


class EmptyInputError(DescriptorError):
    pass


class InvalidCharacterError(DescriptorError):
    pass


class BracketMismatchError(DescriptorError):
    pass


class FingerprintError(DescriptorError):
    pass


class PathSegmentError(DescriptorError):
    pass


class HexFormatError(DescriptorError):
    pass


class KeyClassificationError(DescriptorError):
    pass


class WifChecksumError(DescriptorError):
    pass


class ExtendedKeyError(DescriptorError):
    """
    Raised by the extended key engine, e.g. bad base58check, version or key material
    """


class ExtendedKeyAttributeError(DescriptorError):
    pass


class SeedError(DescriptorError):
    pass


class ChecksumLengthError(DescriptorError):
    pass


class ChecksumMismatchError(DescriptorError):
    pass


class ScriptGrammarError(DescriptorError):
    pass


class ArgumentExtractionError(DescriptorError):
    pass


class ArgCountError(DescriptorError):
    pass


class UnsupportedShArgumentError(DescriptorError):
    pass
