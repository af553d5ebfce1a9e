import dataclasses

import pytest

from onelo.checksum import Checksum
from onelo.content import Content


def test_identity_is_checksum_of_blob() -> None:
    content = Content(b"onelo")

    assert content.identity == Checksum.new(b"onelo")
    assert content.checksum is content.identity
    assert content.size == 5


def test_equal_blobs_have_equal_identity() -> None:
    assert Content(b"same").identity == Content(bytearray(b"same")).identity
    assert Content(b"same") == Content(b"same")
    assert Content(b"same").identity != Content(b"other").identity


def test_identity_cannot_be_assigned() -> None:
    content = Content(b"onelo")

    with pytest.raises(TypeError):
        Content(b"onelo", identity=Checksum.new(b"other"))  # type: ignore[call-arg]
    with pytest.raises(dataclasses.FrozenInstanceError):
        content.identity = Checksum.new(b"other")  # type: ignore[misc]


def test_text_decodes_lazily() -> None:
    assert Content("# Ünïcode\n".encode()).text() == "# Ünïcode\n"

    with pytest.raises(UnicodeDecodeError):
        Content(b"\xff\xfe\xfa").text()


def test_repr_hides_blob() -> None:
    assert "secret" not in repr(Content(b"secret"))
