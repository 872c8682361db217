from song_importer.matcher import contains_either, describe_candidates, find_best_match, find_by_artist
from song_importer.types import Candidate


def cand(id: str, name: str, artist: str) -> Candidate:
    return Candidate(id=id, name=name, artist=artist)


def test_empty_candidates_returns_none():
    assert find_best_match([], "Song", "Artist") is None


def test_title_and_artist_match_wins_over_order():
    cands = [cand("1", "Song A", "Artist X"), cand("2", "Song B", "Artist Y")]
    assert find_best_match(cands, "Song B", "Artist Y").id == "2"


def test_containment_tolerates_suffixes():
    cands = [cand("1", "Other", "Someone"), cand("2", "Song B (Remastered)", "Artist Y feat. Z")]
    assert find_best_match(cands, "song b", "artist y").id == "2"


def test_artist_only_match_is_second_tier():
    cands = [cand("1", "Nope", "Other"), cand("2", "Live Version", "Artist Y")]
    assert find_best_match(cands, "Song B", "Artist Y").id == "2"


def test_falls_back_to_first_candidate():
    cands = [cand("1", "Nope", "Other"), cand("2", "Still no", "Nobody")]
    assert find_best_match(cands, "Song B", "Artist Y").id == "1"


def test_never_none_when_candidates_exist():
    cands = [cand("x", "", "")]
    assert find_best_match(cands, "anything", "anyone") is not None


def test_empty_target_artist_matches_any_artist():
    cands = [cand("1", "Other", "Someone"), cand("2", "Song B", "Whoever")]
    assert find_best_match(cands, "Song B", "").id == "2"
    assert contains_either("Whoever", "")


def test_find_by_artist_returns_none_without_match():
    cands = [cand("1", "Song", "Other")]
    assert find_by_artist(cands, "Artist Y") is None
    assert find_by_artist(cands, "other").id == "1"


def test_describe_candidates():
    assert describe_candidates([cand("7", "Song", "Band")]) == ['[7] "Song" by Band']


def test_whitespace_is_not_trimmed_before_comparing():
    assert not contains_either("   ", "Artist Y")
    cands = [cand("1", "Other", "   "), cand("2", "Nope", "Artist Y")]
    assert find_by_artist(cands, "Artist Y").id == "2"
