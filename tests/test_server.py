"""Tests for Server and ServerCollection."""

import pytest
from amplifier_assets import NoSuchParameterError
from amplifier_assets import NoSuchServerError
from amplifier_assets import Server
from amplifier_assets import ServerCollection
from pydantic import ValidationError


def make_server(name: str, installer: str = "symlink") -> Server:
    return Server(name=name, installer_name=installer, document_root=f"public/{name}")


def test_server_defaults():
    """URL format defaults to /%s and parameters to empty."""
    server = make_server("localhost")

    assert server.url_format == "/%s"
    assert server.parameter_values == {}
    assert not server.has_parameter_values()


def test_server_parameter_values():
    """Parameter values can be read by name."""
    server = Server(
        name="cdn", installer_name="rsync", document_root="ssh://cdn/", parameter_values={"user": "deploy"}
    )

    assert server.has_parameter_value("user")
    assert server.get_parameter_value("user") == "deploy"

    with pytest.raises(NoSuchParameterError):
        server.get_parameter_value("password")


def test_server_url_for():
    """URL format is applied to server paths."""
    server = Server(name="cdn", installer_name="copy", document_root="public", url_format="https://cdn.example/%s")

    assert server.url_for("/css/style.css") == "https://cdn.example/css/style.css"
    assert make_server("localhost").url_for("/css/style.css") == "/css/style.css"


@pytest.mark.parametrize(
    "kwargs",
    [
        {"name": "", "installer_name": "copy", "document_root": "public"},
        {"name": "default", "installer_name": "copy", "document_root": "public"},
        {"name": "local", "installer_name": "", "document_root": "public"},
        {"name": "local", "installer_name": "copy", "document_root": ""},
        {"name": "local", "installer_name": "copy", "document_root": "public", "url_format": "/static/"},
    ],
)
def test_server_invalid(kwargs):
    """Invalid server fields are rejected."""
    with pytest.raises(ValidationError):
        Server(**kwargs)


def test_first_server_is_default():
    """The first server added becomes the default."""
    servers = ServerCollection([make_server("a"), make_server("b")])

    assert servers.get_default_server().name == "a"
    assert servers.get("default").name == "a"
    assert servers.contains("default")
    assert len(servers) == 2
    assert servers.get_server_names() == ["a", "b"]


def test_set_default_server():
    """The default can be reassigned."""
    servers = ServerCollection([make_server("a"), make_server("b")])

    servers.set_default_server("b")

    assert servers.get_default_server().name == "b"


def test_remove_default_promotes_next():
    """Removing the default promotes the earliest added survivor."""
    servers = ServerCollection([make_server("a"), make_server("b"), make_server("c")])

    servers.remove("a")

    assert servers.get_default_server().name == "b"

    servers.remove("default")

    assert servers.get_default_server().name == "c"
    assert servers.get_server_names() == ["c"]


def test_remove_last_server():
    """The collection has no default after removing all servers."""
    servers = ServerCollection([make_server("a")])

    del servers["a"]

    assert servers.is_empty()
    assert not servers.contains("default")
    with pytest.raises(NoSuchServerError, match="empty collection"):
        servers.get_default_server()


def test_get_unknown_server_suggests_names():
    """Unknown server names raise with close matches."""
    servers = ServerCollection([make_server("localhost"), make_server("cdn")])

    with pytest.raises(NoSuchServerError) as exc_info:
        servers.get("localhst")

    assert exc_info.value.suggestions == ["localhost"]
    assert "localhost" in str(exc_info.value)


def test_replace_and_dunders():
    """replace() resets the collection; dunders delegate."""
    servers = ServerCollection([make_server("a")])
    servers.replace([make_server("x"), make_server("y")])

    assert "x" in servers
    assert "a" not in servers
    assert servers["y"].name == "y"
    assert [s.name for s in servers] == ["x", "y"]
    assert servers.get_default_server().name == "x"
    assert set(servers.to_dict()) == {"x", "y"}
