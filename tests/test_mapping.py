"""Tests for AssetMapping."""

from uuid import UUID

import pytest
from amplifier_assets import AssetMapping
from pydantic import ValidationError


@pytest.mark.parametrize(
    "server_path,expected",
    [
        ("", "/"),
        ("/", "/"),
        ("assets/", "/assets"),
        ("/a/b/", "/a/b"),
        ("//css//", "/css"),
        ("x", "/x"),
    ],
)
def test_server_path_normalized(server_path, expected):
    """Server paths start with one slash and never end with one."""
    mapping = AssetMapping(glob="/app/public", server_name="localhost", server_path=server_path)

    assert mapping.server_path == expected


def test_uuid_generated():
    """A UUID is generated when none is passed."""
    mapping1 = AssetMapping(glob="/app/public", server_name="localhost")
    mapping2 = AssetMapping(glob="/app/public", server_name="localhost")

    assert isinstance(mapping1.uuid, UUID)
    assert mapping1.uuid != mapping2.uuid
    assert mapping1.server_path == "/"


def test_uuid_kept():
    """A passed UUID is kept."""
    uuid = UUID("2438256b-c2f5-4a06-a18f-f79755e027dd")

    mapping = AssetMapping(glob="/app/public", server_name="localhost", uuid=uuid)

    assert mapping.uuid == uuid


def test_empty_glob_rejected():
    """Glob must not be empty."""
    with pytest.raises(ValidationError):
        AssetMapping(glob="", server_name="localhost")


def test_empty_server_name_rejected():
    """Server name must not be empty."""
    with pytest.raises(ValidationError):
        AssetMapping(glob="/app/public", server_name="")


def test_mapping_immutable():
    """Mappings are frozen."""
    mapping = AssetMapping(glob="/app/public", server_name="localhost")

    with pytest.raises(ValidationError):
        mapping.glob = "/other"  # type: ignore
