"""Exceptions raised by the onelo core."""


class OneloError(Exception):
    """Base class for recoverable errors raised by onelo."""

    pass


# --- Checksum format errors ---


class FormatError(OneloError, ValueError):
    """Raised when a checksum cannot be decoded."""

    pass


class MalformedHex(FormatError):
    """Raised when checksum text is not valid hexadecimal."""

    pass


class UnexpectedLength(FormatError):
    """Raised when a checksum has the wrong number of bytes."""

    pass


class UnknownCode(FormatError):
    """Raised when a checksum carries an algorithm code that is not known."""

    def __init__(self, code: int) -> None:
        super().__init__(f"Unknown checksum algorithm code 0x{code:02x}")
        self.code = code


class InconsistentLength(FormatError):
    """Raised when the digest length byte disagrees with the algorithm's digest size."""

    def __init__(self, code: int, length: int, expected: int) -> None:
        super().__init__(
            f"Checksum algorithm 0x{code:02x} expects a {expected}-byte digest, header says {length} bytes"
        )
        self.code = code
        self.length = length
        self.expected = expected


# --- Identifier errors ---


class IdentifierError(OneloError, ValueError):
    """Raised when a source identifier or qualified entry identifier is invalid."""

    pass


class ReservedSeparator(IdentifierError):
    """Raised when the `:` namespace separator shows up where it is not allowed."""

    def __init__(self, value: str, what: str = "Source identifiers") -> None:
        super().__init__(f"{what} cannot have `:` in them: {value!r}")
        self.value = value


class UnknownPattern(IdentifierError):
    """Raised when a qualified identifier does not have the form `source:path`."""

    def __init__(self, value: str) -> None:
        super().__init__(f"Qualified identifiers must have the form `source:path`, got {value!r}")
        self.value = value


class MissingExtension(IdentifierError):
    """Raised when an entry path has no extension to identify its content type."""

    def __init__(self, path: str) -> None:
        super().__init__(f"Couldn't find an extension to identify the content type of {path!r}")
        self.path = path


# --- Classification errors ---


class ClassificationError(OneloError, LookupError):
    """Raised when a file extension or MIME string cannot be classified."""

    def __init__(self, value: str) -> None:
        super().__init__(value)
        self.value = value


class UnknownExtension(ClassificationError):
    """Raised for a file extension with no known content type."""

    def __str__(self) -> str:
        return f"Unknown extension: {self.value!r}"


class UnknownIana(ClassificationError):
    """Raised for a MIME string with no known content type."""

    def __str__(self) -> str:
        return f"Unknown IANA media type: {self.value!r}"


# --- Storage errors ---


class StorageError(OneloError):
    """Raised when the cache store cannot be opened, bootstrapped, read, written or closed."""

    def __init__(self, message: str, original_exception: Exception | None = None) -> None:
        super().__init__(message)
        self.original_exception = original_exception

    def __str__(self) -> str:
        base_str = super().__str__()
        if self.original_exception:
            return f"{base_str} (Original Error: {type(self.original_exception).__name__}: {self.original_exception})"
        return base_str


class StoreStateError(RuntimeError):
    """Raised when the cache store is used in a state that does not allow the operation."""

    pass
