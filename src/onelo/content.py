"""Unique pieces of content found in sources."""

from dataclasses import dataclass, field

from onelo.checksum import Checksum


@dataclass(frozen=True)
class Content:
    """
    The unprocessed blob obtained from, for example, a file found in a source directory.

    The identity is always the checksum of the blob; it is derived, never assigned.
    To know what kind of content this is, look at the `SourceEntry` that points to it.
    """

    blob: bytes = field(repr=False)
    identity: Checksum = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "blob", bytes(self.blob))
        object.__setattr__(self, "identity", Checksum.new(self.blob))

    @property
    def checksum(self) -> Checksum:
        return self.identity

    @property
    def size(self) -> int:
        return len(self.blob)

    def text(self, encoding: str = "utf-8") -> str:
        """Decode the blob. UTF-8 is only enforced here, not when the content is read."""
        return self.blob.decode(encoding)
