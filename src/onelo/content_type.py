"""
Content types of source entries.

Resolution goes through two static tables, one keyed by file extension and one
by IANA media type. Anything missing from a table is an error, never a guess.
"""

from dataclasses import dataclass
from enum import Enum

from onelo.errors import UnknownExtension, UnknownIana


class ContentKind(Enum):
    """The closed set of content kinds."""

    MARKDOWN = "markdown"
    OTHER = "other"


@dataclass(frozen=True)
class ContentType:
    """A content type: a known kind, or `OTHER` carrying its raw value."""

    kind: ContentKind
    raw: str | None = None

    @classmethod
    def markdown(cls) -> "ContentType":
        return cls(ContentKind.MARKDOWN)

    @classmethod
    def other(cls, raw: str) -> "ContentType":
        """A recognized type that is not markdown but is still meaningful."""
        return cls(ContentKind.OTHER, raw)

    @classmethod
    def from_extension(cls, ext: str) -> "ContentType":
        """
        Take a file extension such as ``md`` (no leading ``.``) and return its content type.

        Raises:
            UnknownExtension: If the extension is not known.

        """
        try:
            return _EXTENSIONS[ext]
        except KeyError:
            raise UnknownExtension(ext) from None

    @classmethod
    def from_iana(cls, mime: str) -> "ContentType":
        """
        Take an IANA media type such as ``text/markdown`` and return its content type.

        Raises:
            UnknownIana: If the media type is not known.

        """
        try:
            return _IANA[mime]
        except KeyError:
            raise UnknownIana(mime) from None

    @classmethod
    def from_stored(cls, value: str) -> "ContentType":
        """Decode a value written by `iana`. Unknown media types come back as `OTHER`."""
        try:
            return cls.from_iana(value)
        except UnknownIana:
            return cls.other(value)

    @property
    def iana(self) -> str:
        if self.kind is ContentKind.OTHER:
            return self.raw or ""
        return _KIND_TO_IANA[self.kind]

    def __str__(self) -> str:
        return self.iana


MARKDOWN = ContentType.markdown()

_EXTENSIONS: dict[str, ContentType] = {
    "md": MARKDOWN,
}

_IANA: dict[str, ContentType] = {
    "text/markdown": MARKDOWN,
}

_KIND_TO_IANA: dict[ContentKind, str] = {
    ContentKind.MARKDOWN: "text/markdown",
}


def known_extensions() -> frozenset[str]:
    """Return the file extensions that resolve to a content type."""
    return frozenset(_EXTENSIONS)
