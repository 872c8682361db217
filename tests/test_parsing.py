from pathlib import Path

from song_importer.parsing import iter_song_lines, parse_song_line, read_song_file


def test_split_on_first_separator():
    q = parse_song_line("Yesterday - The Beatles")
    assert q.title == "Yesterday"
    assert q.artist == "The Beatles"


def test_artist_keeps_later_separators():
    q = parse_song_line("Love - Me - Kesha")
    assert q.title == "Love"
    assert q.artist == "Me - Kesha"


def test_no_separator_is_title_only():
    q = parse_song_line("  Bohemian Rhapsody  ")
    assert q.title == "Bohemian Rhapsody"
    assert q.artist == ""
    assert q.original == "Bohemian Rhapsody"


def test_hyphen_without_spaces_is_not_a_separator():
    q = parse_song_line("Anti-Hero")
    assert q.title == "Anti-Hero"
    assert q.artist == ""


def test_fields_are_trimmed():
    q = parse_song_line("  Halo   -   Beyoncé ")
    assert q.title == "Halo"
    assert q.artist == "Beyoncé"


def test_blank_lines_are_dropped():
    lines = list(iter_song_lines("A - B\r\n\r\n   \nC - D\n"))
    assert lines == ["A - B", "C - D"]


def test_read_song_file(tmp_path: Path):
    p = tmp_path / "songs.txt"
    p.write_text("Yesterday - The Beatles\n\nIntro\n", encoding="utf-8")
    queries = read_song_file(p)
    assert [q.title for q in queries] == ["Yesterday", "Intro"]
    assert [q.artist for q in queries] == ["The Beatles", ""]
