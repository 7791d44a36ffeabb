from openbeta_site.parsing.paths import normalize_path, parent_tokens, split_path_tokens


def test_normalize_path_rewrites_backslashes():
    assert normalize_path("USA\\Oregon\\Portland") == "USA/Oregon/Portland"


def test_normalize_path_is_noop_on_canonical_input():
    canonical = "USA/Oregon/Broughton Bluff/Hanging Gardens"
    assert normalize_path(canonical) == canonical
    assert normalize_path(normalize_path(canonical)) == canonical


def test_normalize_path_empty():
    assert normalize_path("") == ""


def test_normalize_path_mixed_separators_is_lossy():
    # a literal backslash cannot be told apart from a separator
    assert normalize_path("USA/Odd\\Name") == normalize_path("USA/Odd/Name")


def test_split_and_parent_tokens():
    assert split_path_tokens("") == []
    assert split_path_tokens("USA/Oregon") == ["USA", "Oregon"]
    assert parent_tokens(["USA", "Oregon", "Portland"]) == ["USA", "Oregon"]
    assert parent_tokens(["USA"]) == []
