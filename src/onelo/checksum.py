"""
Self-describing content checksums.

A checksum is rendered as the algorithm code byte, the digest length byte and
the digest itself. For BLAKE3 the text form is ``1e20`` followed by 64 hex
digits. Keeping the algorithm in the value means a checksum written by a newer
algorithm is rejected with `UnknownCode` instead of being misread.
"""

import binascii
from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum
from typing import Any, Protocol, runtime_checkable

import blake3

from onelo.errors import InconsistentLength, MalformedHex, UnexpectedLength, UnknownCode

HEADER_SIZE = 2


@runtime_checkable
class Hasher(Protocol):
    """A protocol for hash-like objects."""

    def update(self, __data: bytes) -> Any:
        """Update the hash object with the bytes-like object."""
        ...

    def digest(self) -> bytes:
        """Return the digest of the data passed to the update() method so far."""
        ...


class ChecksumAlgorithm(Enum):
    """Known checksum algorithms, keyed by their multihash code and digest size."""

    BLAKE3 = (0x1E, 32)

    def __init__(self, code: int, digest_size: int) -> None:
        self.code = code
        self.digest_size = digest_size

    @classmethod
    def from_code(cls, code: int) -> "ChecksumAlgorithm":
        """Return the algorithm for a code byte, raising `UnknownCode` if there is none."""
        for algorithm in cls:
            if algorithm.code == code:
                return algorithm
        raise UnknownCode(code)

    def hasher(self) -> Hasher:
        """Return a fresh hasher for this algorithm."""
        return _HASHERS[self]()


_HASHERS: dict[ChecksumAlgorithm, Callable[[], Hasher]] = {
    ChecksumAlgorithm.BLAKE3: blake3.blake3,
}


DEFAULT_ALGORITHM = ChecksumAlgorithm.BLAKE3


@dataclass(frozen=True, order=True)
class Checksum:
    """
    A content checksum tagged with its algorithm code and digest length.

    Equality, hashing and ordering are structural over ``(code, length, digest)``.
    """

    code: int
    length: int
    digest: bytes

    def __post_init__(self) -> None:
        object.__setattr__(self, "digest", bytes(self.digest))
        algorithm = ChecksumAlgorithm.from_code(self.code)
        if self.length != algorithm.digest_size:
            raise InconsistentLength(self.code, self.length, algorithm.digest_size)
        if len(self.digest) != self.length:
            raise UnexpectedLength(f"Expected a {self.length}-byte digest, got {len(self.digest)} bytes")

    @classmethod
    def new(cls, data: bytes, algorithm: ChecksumAlgorithm = DEFAULT_ALGORITHM) -> "Checksum":
        """Hash the given bytes."""
        hasher = algorithm.hasher()
        hasher.update(data)
        digest = hasher.digest()
        if len(digest) != algorithm.digest_size:
            raise RuntimeError(
                f"{algorithm.name} produced a {len(digest)}-byte digest, expected {algorithm.digest_size} bytes"
            )
        return cls(code=algorithm.code, length=algorithm.digest_size, digest=digest)

    @classmethod
    def from_bytes(cls, raw: bytes) -> "Checksum":
        """
        Decode the binary form ``code | length | digest``.

        Raises:
            UnexpectedLength: If the header is missing or the digest is truncated or padded.
            UnknownCode: If the algorithm code is not known.
            InconsistentLength: If the length byte disagrees with the algorithm.

        """
        if len(raw) < HEADER_SIZE:
            raise UnexpectedLength(f"A checksum needs at least {HEADER_SIZE} header bytes, got {len(raw)}")
        code, length = raw[0], raw[1]
        algorithm = ChecksumAlgorithm.from_code(code)
        if length != algorithm.digest_size:
            raise InconsistentLength(code, length, algorithm.digest_size)
        digest = bytes(raw[HEADER_SIZE:])
        if len(digest) != length:
            raise UnexpectedLength(f"Expected a {length}-byte digest, got {len(digest)} bytes")
        return cls(code=code, length=length, digest=digest)

    @classmethod
    def parse(cls, text: str) -> "Checksum":
        """
        Decode the text form produced by `to_text`.

        Raises:
            MalformedHex: If the text is not an even-length hex string.
            UnexpectedLength: If the header is missing or the digest is truncated or padded.
            UnknownCode: If the algorithm code is not known.
            InconsistentLength: If the length byte disagrees with the algorithm.

        """
        try:
            raw = binascii.unhexlify(text)
        except (binascii.Error, ValueError) as e:
            raise MalformedHex(f"Checksum text is not valid hex: {text!r}") from e
        return cls.from_bytes(raw)

    @property
    def algorithm(self) -> ChecksumAlgorithm:
        return ChecksumAlgorithm.from_code(self.code)

    @property
    def hexdigest(self) -> str:
        """The digest alone, in hex."""
        return self.digest.hex()

    def to_bytes(self) -> bytes:
        return bytes((self.code, self.length)) + self.digest

    def to_text(self) -> str:
        return f"{self.code:02x}{self.length:02x}{self.digest.hex()}"

    def __str__(self) -> str:
        return self.to_text()

    def __repr__(self) -> str:
        return f"Checksum('{self.to_text()}')"
