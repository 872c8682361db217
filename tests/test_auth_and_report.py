import json

import pytest
from rich.console import Console

from song_importer import auth
from song_importer.auth import MissingCredentialsError, load_credentials
from song_importer.cli import resolve_limit, select_queries
from song_importer.log_utils import print_summary, write_results_json
from song_importer.parsing import parse_song_line
from song_importer.types import Candidate, RunSummary


@pytest.fixture(autouse=True)
def no_dotenv(monkeypatch):
    monkeypatch.setattr(auth, "load_dotenv", lambda **kwargs: False)


def test_missing_credentials_lists_both(monkeypatch):
    monkeypatch.delenv("APPLE_BEARER_TOKEN", raising=False)
    monkeypatch.delenv("APPLE_MEDIA_USER_TOKEN", raising=False)
    with pytest.raises(MissingCredentialsError) as exc:
        load_credentials()
    assert exc.value.missing == ["APPLE_BEARER_TOKEN", "APPLE_MEDIA_USER_TOKEN"]
    assert "APPLE_BEARER_TOKEN" in str(exc.value)
    assert "APPLE_MEDIA_USER_TOKEN" in str(exc.value)


def test_one_missing_credential(monkeypatch):
    monkeypatch.setenv("APPLE_BEARER_TOKEN", "abc")
    monkeypatch.delenv("APPLE_MEDIA_USER_TOKEN", raising=False)
    with pytest.raises(MissingCredentialsError) as exc:
        load_credentials()
    assert exc.value.missing == ["APPLE_MEDIA_USER_TOKEN"]


def test_credentials_loaded(monkeypatch):
    monkeypatch.setenv("APPLE_BEARER_TOKEN", "abc")
    monkeypatch.setenv("APPLE_MEDIA_USER_TOKEN", "def")
    creds = load_credentials()
    assert creds.bearer_token == "abc"
    assert creds.media_user_token == "def"


def test_limit_resolution(monkeypatch):
    monkeypatch.delenv("LIMIT", raising=False)
    assert resolve_limit(None) == 10
    monkeypatch.setenv("LIMIT", "3")
    assert resolve_limit(None) == 3
    assert resolve_limit(7) == 7
    monkeypatch.setenv("LIMIT", "not-a-number")
    assert resolve_limit(None) == 10


def test_select_queries_zero_means_all():
    qs = [parse_song_line(f"S{i} - A") for i in range(4)]
    assert select_queries(qs, 0) == qs
    assert select_queries(qs, 2) == qs[:2]


def test_results_json_overwrites(tmp_path):
    out = tmp_path / "results.json"
    out.write_text("old content that is not json", encoding="utf-8")

    summary = RunSummary()
    summary.record_added(parse_song_line("Yesterday - The Beatles"), Candidate(id="1", name="Yesterday", artist="The Beatles"))
    summary.record_not_found(parse_song_line("Nope - Nobody"))
    summary.record_error(parse_song_line("Bad - X"), "HTTP 500: Internal Server Error")
    write_results_json(summary, out)

    data = json.loads(out.read_text(encoding="utf-8"))
    assert data["added"][0] == {
        "query": "Yesterday - The Beatles",
        "match": {"id": "1", "name": "Yesterday", "artist": "The Beatles", "album": "", "url": ""},
    }
    assert data["notFound"] == ["Nope - Nobody"]
    assert data["errors"] == [{"query": "Bad - X", "error": "HTTP 500: Internal Server Error"}]


def test_print_summary_counts():
    console = Console(record=True, width=80)
    summary = RunSummary(not_found=["Nope - Nobody"], aborted=True)
    print_summary(summary, console)
    text = console.export_text()
    assert "Not found" in text
    assert "Nope - Nobody" in text
    assert "aborted" in text
