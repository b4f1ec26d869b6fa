"""Errors raised while decoding a transaction."""


class ParseError(ValueError):
    """Base class for all transaction decoding errors."""


class InvalidHexError(ParseError):
    """Input is not a valid hex string."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid hex string: {reason}")


class UnexpectedEOFError(ParseError):
    """A read ran past the end of the buffer."""

    def __init__(self, position: int, expected: int):
        self.position = position
        self.expected = expected
        super().__init__(
            f"Unexpected end of data at position {position}, expected {expected} bytes"
        )


class InvalidVarIntError(ParseError):
    """Compact size integer is not minimally encoded (strict mode only)."""

    def __init__(self, position: int):
        self.position = position
        super().__init__(f"Invalid varint encoding at position {position}")


class InvalidTransactionError(ParseError):
    """Transaction is structurally invalid."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid transaction: {reason}")


class InvalidScriptError(ParseError):
    """Script contains a malformed push (strict mode only)."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid script: {reason}")


class InvalidWitnessError(ParseError):
    """Witness section is malformed (strict mode only)."""

    def __init__(self, reason: str):
        self.reason = reason
        super().__init__(f"Invalid witness data: {reason}")


class UnsupportedVersionError(ParseError):
    """Reserved: no transaction version is currently rejected."""

    def __init__(self, version: int):
        self.version = version
        super().__init__(f"Unsupported transaction version: {version}")


class TrailingDataError(ParseError):
    """Bytes remain in the buffer after the locktime field."""

    def __init__(self, count: int):
        self.count = count
        super().__init__(f"Data remaining after parsing: {count} bytes")
