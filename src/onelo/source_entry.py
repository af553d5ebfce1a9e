"""Source entries: qualified references to files within a source."""

import dataclasses
from dataclasses import dataclass

from onelo.checksum import Checksum
from onelo.content_type import ContentType
from onelo.errors import MissingExtension, UnknownPattern
from onelo.source import SEPARATOR, SourceId, guard_against_char


@dataclass(frozen=True)
class SourceEntry:
    """
    The unprocessed information obtained from, for example, a file found in a source directory.

    ``path`` is the local path within the source. ``content_id`` stays empty until the
    matching `Content` has been hashed.
    """

    path: str
    source_id: SourceId
    content_type: ContentType
    content_id: Checksum | None = None

    @classmethod
    def parse(cls, qualified_id: str) -> "SourceEntry":
        """
        Parse a qualified identifier of the form ``source_id:path``.

        The string is split on the first ``:``. The content type comes from the
        extension of the last path segment.

        Raises:
            UnknownPattern: If there is no ``:``.
            ReservedSeparator: If the path contains another ``:``.
            MissingExtension: If the last path segment has no extension.
            UnknownExtension: If the extension has no known content type.

        """
        source_part, sep, path = qualified_id.partition(SEPARATOR)
        if not sep:
            raise UnknownPattern(qualified_id)

        source_id = SourceId.parse(source_part)
        # A second separator would make the qualified form ambiguous.
        guard_against_char(path, what="Entry paths")

        return cls(path=path, source_id=source_id, content_type=ContentType.from_extension(extension_of(path)))

    @property
    def qualified_id(self) -> str:
        return f"{self.source_id}{SEPARATOR}{self.path}"

    @property
    def extension(self) -> str:
        return extension_of(self.path)

    def with_content(self, checksum: Checksum) -> "SourceEntry":
        """Return a copy pointing at the given content checksum."""
        return dataclasses.replace(self, content_id=checksum)

    def __str__(self) -> str:
        return self.qualified_id


def extension_of(path: str) -> str:
    """Return the text after the last ``.`` of the final path segment."""
    name = path.rsplit("/", 1)[-1]
    _, dot, ext = name.rpartition(".")
    if not dot:
        raise MissingExtension(path)
    return ext
