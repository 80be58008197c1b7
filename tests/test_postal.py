from shipquote.domain.postal import extract_postal, postal_prefix


def test_extract_from_free_text():
    assert extract_postal("12 rue de Rivoli, 75001 Paris") == "75001"


def test_first_five_digit_run_wins():
    assert extract_postal("69000 Lyon / 75001") == "69000"


def test_longer_digit_runs_are_not_postal_codes():
    assert extract_postal("Tel 0612345678") == ""


def test_extract_from_structured_address():
    assert extract_postal({"postal": "69000", "city": "Lyon"}) == "69000"
    assert extract_postal({"Postal": 13001}) == "13001"


def test_unextractable_is_empty():
    assert extract_postal("Paris") == ""
    assert extract_postal({"city": "Paris"}) == ""
    assert extract_postal(None) == ""


def test_prefix():
    assert postal_prefix("75001", 2) == "75"
    assert postal_prefix("", 2) == ""
    assert postal_prefix("75001", 0) == ""
