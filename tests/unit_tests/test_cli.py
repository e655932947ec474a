from types import SimpleNamespace

import httpx
import pytest
from click.testing import CliRunner

from drive_files_api import cli as cli_module
from drive_files_api.cli import cli, filename_from_disposition, filter_listing
from drive_files_api.client import FilesApiClient
from drive_files_api.config.settings import get_settings
from tests.consts import TEST_ROOT_FOLDER_ID


@pytest.fixture
def runner(monkeypatch):
    monkeypatch.setenv("GOOGLE_DRIVE_FOLDER_ID", TEST_ROOT_FOLDER_ID)
    get_settings.cache_clear()
    yield CliRunner()
    get_settings.cache_clear()


@pytest.fixture
def asgi_cli(monkeypatch, app):
    """Point the CLI's API client at the in-process app."""

    class AsgiFilesApiClient(FilesApiClient):
        def __init__(self, base_url, http_client=None, upload_chunk_size=None):
            transport = httpx.ASGITransport(app=app)
            super().__init__(
                base_url,
                http_client=httpx.AsyncClient(transport=transport, base_url=base_url),
                upload_chunk_size=upload_chunk_size,
            )
            self._owns_client = True

    monkeypatch.setattr(cli_module, "FilesApiClient", AsgiFilesApiClient)


def test__filename_from_disposition():
    assert filename_from_disposition('attachment; filename="a b.zip"', "files.zip") == "a b.zip"
    assert filename_from_disposition(None, "files.zip") == "files.zip"
    assert filename_from_disposition("attachment", "x.pdf") == "x.pdf"
    assert filename_from_disposition("attachment; filename*=UTF-8''say%20%22hi%22.txt", "x") == 'say "hi".txt'


def test__filter_listing():
    entries = [SimpleNamespace(name=name) for name in ("Holiday.HEIC", "notes.txt", "holiday-2.mov")]

    assert [e.name for e in filter_listing(entries, "holiday")] == ["Holiday.HEIC", "holiday-2.mov"]
    assert filter_listing(entries, None) == entries


def test__show_config(runner):
    result = runner.invoke(cli, ["show-config"])

    assert result.exit_code == 0
    assert f"Drive Root Folder: {TEST_ROOT_FOLDER_ID}" in result.output


def test__mkdir__blank_name(runner):
    result = runner.invoke(cli, ["mkdir", "  "])

    assert result.exit_code == 2
    assert "Folder name is required" in result.output


def test__mkdir_and_ls(runner, asgi_cli, fake_drive):
    created = runner.invoke(cli, ["mkdir", "Trips"])
    listed = runner.invoke(cli, ["ls"])

    assert created.exit_code == 0, created.output
    assert "Created folder" in created.output
    assert listed.exit_code == 0, listed.output
    assert "Trips/" in listed.output


def test__ls__match_filters_by_name(runner, asgi_cli, fake_drive):
    fake_drive.add("Beach.heic", "image/heic", parent=TEST_ROOT_FOLDER_ID, size=10)
    fake_drive.add("taxes.pdf", "application/pdf", parent=TEST_ROOT_FOLDER_ID, size=10)

    matched = runner.invoke(cli, ["ls", "--match", "BEACH"])
    unmatched = runner.invoke(cli, ["ls", "--match", "zzz"])

    assert matched.exit_code == 0, matched.output
    assert "Beach.heic" in matched.output
    assert "taxes.pdf" not in matched.output
    assert "No entries match" in unmatched.output


def test__ls__empty_folder(runner, asgi_cli):
    result = runner.invoke(cli, ["ls", "--folder-id", "nothing-here"])

    assert result.exit_code == 0
    assert "This folder is empty" in result.output


def test__rm(runner, asgi_cli, fake_drive):
    record = fake_drive.add("old.txt", "text/plain", parent=TEST_ROOT_FOLDER_ID)

    result = runner.invoke(cli, ["rm", record["id"], "--yes"])

    assert result.exit_code == 0, result.output
    assert fake_drive.records == {}


def test__rm__api_error(runner, asgi_cli):
    result = runner.invoke(cli, ["rm", "missing", "--yes"])

    assert result.exit_code == 1
    assert "Failed to delete file" in result.output


def test__upload(runner, asgi_cli, fake_drive, tmp_path):
    paths = []
    for name, size in (("a.txt", 100), ("b.pdf", 200), ("c.heic", 300), ("d.txt", 50)):
        path = tmp_path / name
        path.write_bytes(b"0" * size)
        paths.append(str(path))

    result = runner.invoke(cli, ["upload", *paths])

    assert result.exit_code == 0, result.output
    assert sorted(record["name"] for record in fake_drive.records.values()) == ["a.txt", "b.pdf", "c.heic", "d.txt"]
    assert "c.heic" in result.output


def test__upload__reports_failures(runner, asgi_cli, fake_drive, tmp_path):
    fake_drive.failures["create"] = RuntimeError("quota exceeded")
    path = tmp_path / "a.txt"
    path.write_bytes(b"abc")

    result = runner.invoke(cli, ["upload", str(path)])

    assert result.exit_code == 1
    assert "1 of 1 uploads failed" in result.output


def test__download__single_file(runner, asgi_cli, fake_container, tmp_path):
    fake_container.add("docs/report.pdf", b"%PDF", "application/pdf")
    target = tmp_path / "out.pdf"

    result = runner.invoke(cli, ["download", "docs/report.pdf", "-o", str(target)])

    assert result.exit_code == 0, result.output
    assert target.read_bytes() == b"%PDF"
