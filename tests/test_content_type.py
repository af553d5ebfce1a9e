import pytest

from onelo.content_type import ContentKind, ContentType, known_extensions
from onelo.errors import ClassificationError, UnknownExtension, UnknownIana


def test_parse_known_extension() -> None:
    assert ContentType.from_extension("md") == ContentType.markdown()


def test_parse_unknown_extension() -> None:
    with pytest.raises(UnknownExtension) as excinfo:
        ContentType.from_extension("xyz")

    assert excinfo.value.value == "xyz"


def test_parse_known_iana() -> None:
    assert ContentType.from_iana("text/markdown") == ContentType.markdown()


def test_parse_unknown_iana() -> None:
    with pytest.raises(UnknownIana) as excinfo:
        ContentType.from_iana("text/xyz")

    assert excinfo.value.value == "text/xyz"


@pytest.mark.parametrize("ext", ["MD", ".md", "markdown", ""])
def test_lookups_never_guess(ext: str) -> None:
    with pytest.raises(ClassificationError):
        ContentType.from_extension(ext)


def test_other_is_not_returned_by_lookups() -> None:
    with pytest.raises(UnknownIana):
        ContentType.from_iana("application/json")

    other = ContentType.other("application/json")
    assert other.kind is ContentKind.OTHER
    assert other.iana == "application/json"
    assert other != ContentType.markdown()


def test_stored_value_round_trip() -> None:
    assert ContentType.from_stored(ContentType.markdown().iana) == ContentType.markdown()
    assert ContentType.from_stored("text/plain") == ContentType.other("text/plain")


def test_known_extensions() -> None:
    assert known_extensions() == frozenset({"md"})
