"""Tests for the srrclient command line."""

import os
from unittest.mock import MagicMock

import pytest
from typer.testing import CliRunner

from srrclient import __version__
from srrclient.cli import main_cli
from srrclient.cli.main_cli import main_app
from srrclient.core.errors import AuthenticationError, TransportError
from srrclient.schemas.srrdb import SearchResponse, SearchResult, UploadedFile, UploadResponse

runner = CliRunner()


@pytest.fixture
def client(monkeypatch):
    for name in ("SRRDB_USERNAME", "SRRDB_PASSWORD", "SRRDB_LEGACY_MARKER_CHECK"):
        monkeypatch.delenv(name, raising=False)
    client_cls = MagicMock()
    monkeypatch.setattr(main_cli, "SrrdbClient", client_cls)
    return client_cls.return_value


def test_version_flag():
    result = runner.invoke(main_app, ["--version"])
    assert result.exit_code == 0
    assert f"Version: {__version__}" in result.output
    assert "GNU General Public License v3.0" in result.output


def test_search_sorted_by_date(client):
    client.search.return_value = SearchResponse(
        resultsCount="2",
        results=[
            SearchResult(release="B-GRP", date="2015-01-01 00:00:00", hasNFO="yes", hasSRS="yes"),
            SearchResult(release="A-GRP", date="2014-01-01 00:00:00"),
        ],
    )

    result = runner.invoke(main_app, ["search", "some", "group:grp"])

    assert result.exit_code == 0
    client.search.assert_called_once_with("some group:grp")
    assert result.output.splitlines() == [
        "[2014-01-01 00:00:00] A-GRP",
        "[2015-01-01 00:00:00] B-GRP [NFO] [SRS]",
    ]


def test_search_nothing_found(client):
    client.search.return_value = SearchResponse(resultsCount="0")
    result = runner.invoke(main_app, ["search", "nothing"])
    assert result.exit_code == 1
    assert "Nothing found!" in result.output


def test_search_failure(client):
    client.search.side_effect = TransportError("Unexpected return code 500.")
    result = runner.invoke(main_app, ["search", "x"])
    assert result.exit_code == 1
    assert "Failed to search for query" in result.output


def test_download_without_dirnames(client):
    result = runner.invoke(main_app, ["download"])
    assert result.exit_code == 1
    assert "at least one dirname" in result.output


def test_download_saves_members(client, block, container, tmp_path):
    client.download.return_value = container(block(b"Rel\\rel.nfo", b"nfo"))

    result = runner.invoke(main_app, ["download", "-e", "nfo", "--output-dir", str(tmp_path), "Rel"])

    assert result.exit_code == 0
    assert (tmp_path / "Rel" / "rel.nfo").read_bytes() == b"nfo"
    assert "Saved file to" in result.output


def test_download_to_stdout(client, block, container):
    client.download.return_value = container(block(b"rel.nfo", b"\x00binary nfo\xff"))

    result = runner.invoke(main_app, ["download", "-o", "-e", "NFO", "Rel"])

    assert result.exit_code == 0
    assert result.stdout_bytes == b"\x00binary nfo\xff"


def test_download_reports_and_continues(client, block, container, tmp_path):
    client.download.side_effect = [b"<html>", container(block(b"a.sfv", b"sfv"))]

    result = runner.invoke(main_app, ["download", "-e", "nfo", "--output-dir", str(tmp_path), "Bad", "Good"])

    assert result.exit_code == 0
    assert "isn't a valid SRR file" in result.output
    assert "Extension not found in SRR of Good" in result.output


def test_download_legacy_marker_flag(client, block, container, tmp_path):
    client.download.return_value = container(block(b"old.nfo", b"x", marker=b"\x6a\x6a\x00"))

    result = runner.invoke(main_app, ["download", "-e", "nfo", "--legacy-marker", "--output-dir", str(tmp_path), "Rel"])

    assert result.exit_code == 0
    assert (tmp_path / "old.nfo").read_bytes() == b"x"


def test_upload_without_files(client):
    result = runner.invoke(main_app, ["upload"])
    assert result.exit_code == 1
    assert "at least one file" in result.output


def test_upload_srrs_anonymously(client, tmp_path):
    path = tmp_path / "Rel.srr"
    path.write_bytes(b"\x69\x69\x69")
    client.upload_srrs.return_value = UploadResponse(files=[UploadedFile(name="Rel", message=" - ok")])

    result = runner.invoke(main_app, ["upload", str(path)])

    assert result.exit_code == 0
    assert "Rel - ok" in result.output
    client.login.assert_not_called()


def test_upload_stored_file_needs_login(client):
    result = runner.invoke(main_app, ["upload", "-r", "Rel", "proof.jpg"])
    assert result.exit_code == 1
    assert "username and password" in result.output
    client.upload_stored_file.assert_not_called()


def test_upload_stored_file_failed_login(client):
    client.login.side_effect = AuthenticationError("Wrong authentication?")
    result = runner.invoke(main_app, ["upload", "-n", "u", "-p", "p", "-r", "Rel", "proof.jpg"])
    assert result.exit_code == 1
    assert "Failed to login" in result.output


def test_upload_stored_files(client):
    client.upload_stored_file.return_value = "File added."
    result = runner.invoke(main_app, ["upload", "-n", "u", "-p", "p", "-r", "Rel", "-f", "Proof", "/x/proof.jpg"])
    assert result.exit_code == 0
    assert "proof.jpg: File added." in result.output
    client.upload_stored_file.assert_called_once_with("/x/proof.jpg", "Rel", "Proof", client.login.return_value)


def test_download_latin1_member_name(client, block, container, tmp_path):
    client.download.side_effect = [
        container(block(b"caf\xe9.nfo", b"nfo")),
        container(block(b"second.nfo", b"2")),
    ]

    result = runner.invoke(main_app, ["download", "-e", "nfo", "--output-dir", str(tmp_path), "Rel", "Other"])

    assert result.exit_code == 0
    assert (tmp_path / os.fsdecode(b"caf\xe9.nfo")).read_bytes() == b"nfo"
    assert (tmp_path / "second.nfo").read_bytes() == b"2"
    assert "caf\ufffd.nfo" in result.output


def test_legacy_marker_from_environment(client, block, container, tmp_path, monkeypatch):
    monkeypatch.setenv("SRRDB_LEGACY_MARKER_CHECK", "1")
    client.download.return_value = container(block(b"old.nfo", b"x", marker=b"\x6a\x6a\x00"))

    result = runner.invoke(main_app, ["download", "-e", "nfo", "--output-dir", str(tmp_path), "Rel"])

    assert result.exit_code == 0
    assert (tmp_path / "old.nfo").read_bytes() == b"x"


def test_strict_marker_overrides_environment(client, block, container, tmp_path, monkeypatch):
    monkeypatch.setenv("SRRDB_LEGACY_MARKER_CHECK", "1")
    client.download.return_value = container(block(b"old.nfo", b"x", marker=b"\x6a\x6a\x00"))

    result = runner.invoke(main_app, ["download", "-e", "nfo", "--strict-marker", "--output-dir", str(tmp_path), "Rel"])

    assert result.exit_code == 0
    assert not (tmp_path / "old.nfo").exists()
    assert "Extension not found in SRR of Rel" in result.output

