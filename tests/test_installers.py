"""Tests for the copy and symlink installers."""

import os
from pathlib import Path

import pytest
from amplifier_assets import AssetError
from amplifier_assets import AssetMapping
from amplifier_assets import CopyInstaller
from amplifier_assets import FilesystemRepository
from amplifier_assets import InstallationParams
from amplifier_assets import InstallerManager
from amplifier_assets import Server
from amplifier_assets import SymlinkInstaller
from amplifier_assets.installers import DocumentRoot


@pytest.fixture
def repo(tmp_path):
    public = tmp_path / "res" / "app" / "public"
    (public / "css").mkdir(parents=True)
    (public / "js").mkdir()
    (public / "css" / "style.css").write_text("body {}")
    (public / "js" / "app.js").write_text("init();")
    (public / "robots.txt").write_text("User-agent: *")
    return FilesystemRepository(tmp_path / "res")


def install(tmp_path, repo, root_scope, installer, installer_name, glob, server_path="/", parameter_values=None):
    descriptor = InstallerManager(root_scope).get_installer_descriptor(installer_name)
    server = Server(
        name="localhost",
        installer_name=installer_name,
        document_root="public",
        parameter_values=parameter_values or {},
    )
    mapping = AssetMapping(glob=glob, server_name="localhost", server_path=server_path)
    params = InstallationParams(installer, descriptor, repo.find(glob), mapping, server, tmp_path)

    installer.validate_params(params)
    for resource in params.resources:
        installer.install_resource(resource, params)

    return tmp_path / "public"


def tree(public):
    return sorted(p.relative_to(public) for p in public.rglob("*"))


def test_copy_directory_contents_to_root(tmp_path, repo, root_scope):
    """A directory installed at / has its children copied into the document root."""
    public = install(tmp_path, repo, root_scope, CopyInstaller(), "copy", "/app/public")

    assert (public / "css" / "style.css").read_text() == "body {}"
    assert (public / "js" / "app.js").read_text() == "init();"
    assert (public / "robots.txt").is_file()
    assert not (public / "css").is_symlink()


def test_copy_glob_below_server_path(tmp_path, repo, root_scope):
    """Matches are installed relative to the glob's base path."""
    public = install(tmp_path, repo, root_scope, CopyInstaller(), "copy", "/app/public/**/*.css", "/assets")

    assert (public / "assets" / "css" / "style.css").read_text() == "body {}"
    assert not (public / "assets" / "js").exists()


def test_copy_single_file_to_path(tmp_path, repo, root_scope):
    """A static glob is installed at the server path itself."""
    public = install(tmp_path, repo, root_scope, CopyInstaller(), "copy", "/app/public/robots.txt", "/robots.txt")

    assert (public / "robots.txt").read_text() == "User-agent: *"


@pytest.mark.parametrize("glob", ["/app/public/robots.txt", "/app/public/*.txt"])
def test_copy_file_to_root_keeps_name(tmp_path, repo, root_scope, glob):
    """A file installed at / is written under its own name."""
    public = install(tmp_path, repo, root_scope, CopyInstaller(), "copy", glob)

    assert tree(public) == [Path("robots.txt")]
    assert (public / "robots.txt").read_text() == "User-agent: *"


@pytest.mark.parametrize("installer,installer_name", [(CopyInstaller(), "copy"), (SymlinkInstaller(), "symlink")])
@pytest.mark.parametrize("glob,server_path", [("/app/public/{css,js}", "/assets"), ("/app/public", "/")])
def test_install_is_idempotent(tmp_path, repo, root_scope, installer, installer_name, glob, server_path):
    """Installing twice leaves the same tree as installing once."""
    public = install(tmp_path, repo, root_scope, installer, installer_name, glob, server_path)
    installed_once = tree(public)

    install(tmp_path, repo, root_scope, installer, installer_name, glob, server_path)

    assert installed_once
    assert tree(public) == installed_once


def test_copy_reinstall_picks_up_changes(tmp_path, repo, root_scope):
    """Installing twice replaces the previous copy."""
    install(tmp_path, repo, root_scope, CopyInstaller(), "copy", "/app/public/{css,js}", "/assets")
    (tmp_path / "res" / "app" / "public" / "css" / "style.css").write_text("body { color: red }")

    public = install(tmp_path, repo, root_scope, CopyInstaller(), "copy", "/app/public/{css,js}", "/assets")

    assert (public / "assets" / "css" / "style.css").read_text() == "body { color: red }"


def test_copy_nested_matches_installed_with_parent(tmp_path, repo, root_scope):
    """Matches below another match are copied with their parent only."""
    public = install(tmp_path, repo, root_scope, CopyInstaller(), "copy", "/app/public/**/*")

    assert tree(public) == [Path("css"), Path("css/style.css"), Path("js"), Path("js/app.js"), Path("robots.txt")]


def test_copy_to_absolute_document_root(tmp_path, repo, root_scope):
    """Absolute document roots are used as they are."""
    descriptor = InstallerManager(root_scope).get_installer_descriptor("copy")
    target = tmp_path / "var" / "www"
    server = Server(name="localhost", installer_name="copy", document_root=str(target))
    mapping = AssetMapping(glob="/app/public/css", server_name="localhost", server_path="/css")
    params = InstallationParams(CopyInstaller(), descriptor, repo.find(mapping.glob), mapping, server, tmp_path / "x")

    for resource in params.resources:
        params.installer.install_resource(resource, params)

    assert (target / "css" / "style.css").is_file()


def test_symlink_relative(tmp_path, repo, root_scope):
    """Symlinks are relative by default."""
    public = install(tmp_path, repo, root_scope, SymlinkInstaller(), "symlink", "/app/public/{css,js}", "/assets")

    link = public / "assets" / "css"
    assert link.is_symlink()
    assert not os.path.isabs(os.readlink(link))
    assert (link / "style.css").read_text() == "body {}"


@pytest.mark.parametrize("relative", [False, "false", "0", "no", "off"])
def test_symlink_absolute(tmp_path, repo, root_scope, relative):
    """The relative parameter switches to absolute links."""
    public = install(
        tmp_path,
        repo,
        root_scope,
        SymlinkInstaller(),
        "symlink",
        "/app/public/{css,js}",
        parameter_values={"relative": relative},
    )

    link = public / "css"
    assert link.is_symlink()
    assert os.path.isabs(os.readlink(link))
    assert (link / "style.css").read_text() == "body {}"


def test_symlink_directory_contents_to_root(tmp_path, repo, root_scope):
    """A directory linked at / has its children linked."""
    public = install(tmp_path, repo, root_scope, SymlinkInstaller(), "symlink", "/app/public")

    assert public.is_dir()
    assert not public.is_symlink()
    assert (public / "css").is_symlink()
    assert (public / "robots.txt").is_symlink()


@pytest.mark.parametrize("relative", [True, "true", "1", "yes"])
def test_symlink_relative_strings(tmp_path, repo, root_scope, relative):
    """String flags that read as true keep relative links."""
    public = install(
        tmp_path,
        repo,
        root_scope,
        SymlinkInstaller(),
        "symlink",
        "/app/public/{css,js}",
        parameter_values={"relative": relative},
    )

    assert not os.path.isabs(os.readlink(public / "css"))


def test_symlink_is_idempotent(tmp_path, repo, root_scope):
    """Linking twice replaces the existing links."""
    install(tmp_path, repo, root_scope, SymlinkInstaller(), "symlink", "/app/public/{css,js}", "/assets")

    public = install(tmp_path, repo, root_scope, SymlinkInstaller(), "symlink", "/app/public/{css,js}", "/assets")

    assert (public / "assets" / "js" / "app.js").read_text() == "init();"


@pytest.mark.parametrize(
    "glob,links",
    [
        ("/app/**/*", ["public"]),
        ("/app/public/**/*", ["css", "js", "robots.txt"]),
    ],
)
def test_symlink_recursive_glob_keeps_sources(tmp_path, repo, root_scope, glob, links):
    """Recursive globs link the outermost matches and never write into the repository."""
    source = tmp_path / "res" / "app" / "public" / "css" / "style.css"

    public = install(tmp_path, repo, root_scope, SymlinkInstaller(), "symlink", glob)
    installed_once = tree(public)
    install(tmp_path, repo, root_scope, SymlinkInstaller(), "symlink", glob)

    assert sorted(p.name for p in public.iterdir()) == links
    assert all((public / name).is_symlink() for name in links)
    assert not source.is_symlink()
    assert source.read_text() == "body {}"
    assert tree(public) == installed_once


def test_document_root_refuses_symlinked_parent(tmp_path, repo):
    """Nothing is written through a link inside the document root."""
    source_dir = tmp_path / "res" / "app" / "public" / "css"
    public = tmp_path / "public"
    public.mkdir()
    (public / "css").symlink_to(source_dir, target_is_directory=True)

    document_root = DocumentRoot(public, symlinks=True)

    with pytest.raises(AssetError, match="symlink") as exc_info:
        document_root.add("/css/style.css", repo.get("/app/public/css/style.css"))
    with pytest.raises(AssetError):
        document_root.remove("/css/style.css")

    assert exc_info.value.context["server_path"] == "/css/style.css"
    assert not (source_dir / "style.css").is_symlink()
    assert (source_dir / "style.css").read_text() == "body {}"


def test_symlink_replaces_copy(tmp_path, repo, root_scope):
    """Existing copies are replaced by links."""
    install(tmp_path, repo, root_scope, CopyInstaller(), "copy", "/app/public/css", "/css")

    public = install(tmp_path, repo, root_scope, SymlinkInstaller(), "symlink", "/app/public/css", "/css")

    assert (public / "css").is_symlink()
