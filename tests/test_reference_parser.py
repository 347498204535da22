import pytest

from reference_parser import (
    CitationError,
    EmptyBookName,
    InvalidRange,
    InvalidVerse,
    NoColonFound,
    NoColonOrSpace,
    NoSpaceFound,
    count_verses,
    extract_book_name,
    normalize,
    parse_verse_number,
    try_count_verses,
    try_extract_book_name,
)


@pytest.mark.parametrize("reference,book,verses", [
    ("Genesis 1:1", "Genesis", 1),
    ("Psalm 119:105", "Psalms", 1),
    ("2 Timothy 3:16", "2 Timothy", 1),
    ("Romans 5:1-8", "Romans", 8),
    ("Jude 24-25", "Jude", 2),
    ("Proverbs 12:4a", "Proverbs", 1),
    ("Colossians 1:9a-12", "Colossians", 4),
    ("Genesis 1:5-1", "Genesis", 1),
])
def test_reference_table(reference, book, verses):
    assert extract_book_name(reference) == book
    assert count_verses(reference) == verses


class TestNormalize:

    def test_strips_bidi_marks(self):
        assert normalize("Psalm \u202d51\u202c:\u202d3") == "Psalm 51:3"

    def test_strips_zero_width_and_bom(self):
        assert normalize("\ufeffJohn\u200b 3:16") == "John 3:16"

    def test_strips_control_characters(self):
        assert normalize("John\x00 3:16\n") == "John 3:16"
        assert normalize("Genesis\t1:1") == "Genesis1:1"

    def test_keeps_other_characters(self):
        assert normalize("Ésaïe 40:31 «ok»") == "Ésaïe 40:31 «ok»"

    def test_empty(self):
        assert normalize("") == ""

    @pytest.mark.parametrize("s", [
        "", "Genesis 1:1", "\u202a\u202b\u202c\u202d\u202e", "a\x1fb\u200bc\ufeff", "\x7f\x85 x",
    ])
    def test_idempotent(self, s):
        assert normalize(normalize(s)) == normalize(s)


class TestExtractBookName:

    def test_multi_chapter_books(self):
        assert try_extract_book_name("John 3:16") == "John"
        assert try_extract_book_name("Romans 5:1-8") == "Romans"

    def test_numbered_books(self):
        assert try_extract_book_name("1 Samuel 17:47") == "1 Samuel"
        assert try_extract_book_name("1 Corinthians 13:4-7") == "1 Corinthians"
        assert try_extract_book_name("3 John 14") == "3 John"

    def test_single_chapter_books(self):
        assert try_extract_book_name("Jude 24") == "Jude"
        assert try_extract_book_name("Philemon 1") == "Philemon"
        assert try_extract_book_name("Obadiah 1") == "Obadiah"

    def test_psalm_alias_is_case_insensitive(self):
        assert extract_book_name("PSALM 119:105") == "Psalms"
        assert extract_book_name("psalm 23:1") == "Psalms"
        assert extract_book_name("Psalms 23:1") == "Psalms"

    def test_no_other_canonicalization(self):
        assert try_extract_book_name("1Samuel 3:4") == "1Samuel"
        assert try_extract_book_name("genesis 1:1") == "genesis"

    def test_verse_letters(self):
        assert try_extract_book_name("Acts 22:16b") == "Acts"

    def test_unicode_pollution(self):
        assert try_extract_book_name("Psalm \u202d51\u202c:\u202d3") == "Psalms"
        assert try_extract_book_name("Ephesians\u202c \u202d4:32\u202c") == "Ephesians"

    def test_uses_last_space(self):
        assert try_extract_book_name("Song of Solomon 2:4") == "Song of Solomon"

    @pytest.mark.parametrize("reference", ["Genesis", ""])
    def test_no_space(self, reference):
        with pytest.raises(NoSpaceFound):
            try_extract_book_name(reference)
        assert extract_book_name(reference) is None

    def test_empty_book_name(self):
        with pytest.raises(EmptyBookName):
            try_extract_book_name("   3:16")
        with pytest.raises(EmptyBookName):
            try_extract_book_name(" ")

    def test_fallback_writes_warning(self, capsys):
        assert extract_book_name("Genesis") is None
        err = capsys.readouterr().err
        assert err.startswith("Warning: No space found in reference 'Genesis'")

    def test_errors_are_value_errors(self):
        with pytest.raises(ValueError) as excinfo:
            try_extract_book_name("\u202dGenesis")
        assert isinstance(excinfo.value, CitationError)
        assert excinfo.value.reference == "Genesis"


class TestCountVerses:

    def test_single_verse(self):
        assert try_count_verses("Genesis 1:1") == 1
        assert try_count_verses("2 Timothy 3:16") == 1
        assert try_count_verses("Psalm 119:105") == 1

    def test_simple_range(self):
        assert try_count_verses("Genesis 1:1-5") == 5
        assert try_count_verses("John 3:16-17") == 2

    def test_single_verse_range(self):
        assert try_count_verses("John 3:16-16") == 1

    def test_letter_suffixes(self):
        assert try_count_verses("Proverbs 12:4a") == 1
        assert try_count_verses("Genesis 1:1b") == 1
        assert try_count_verses("Genesis 1:1b-3") == 3
        assert try_count_verses("Romans 5:1a-5b") == 5

    def test_whitespace(self):
        assert try_count_verses("Genesis 1: 1") == 1
        assert try_count_verses("Genesis 1:1 - 5") == 5
        assert try_count_verses("Romans 5: 1 - 8 ") == 8

    def test_single_chapter_books_without_colon(self):
        assert try_count_verses("Jude 24-25") == 2
        assert try_count_verses("Jude 24") == 1
        assert try_count_verses("Philemon 1") == 1
        assert try_count_verses("3 John 14") == 1
        assert try_count_verses("Obadiah 1") == 1
        assert try_count_verses("2 John 1-3") == 3
        assert try_count_verses("jude 3") == 1

    def test_single_chapter_books_with_colon(self):
        assert try_count_verses("Jude 1:24-25") == 2

    def test_unicode_pollution(self):
        assert try_count_verses("Psalm \u202d51\u202c:\u202d3") == 1
        assert try_count_verses("Genesis\u202d \u202d1\u202c:\u202d1") == 1

    def test_multi_chapter_book_without_colon(self):
        with pytest.raises(NoColonFound):
            try_count_verses("Genesis 1")
        with pytest.raises(NoColonFound):
            try_count_verses("1 John 4")

    def test_no_colon_or_space(self):
        with pytest.raises(NoColonOrSpace):
            try_count_verses("Genesis")
        with pytest.raises(NoColonOrSpace):
            try_count_verses("")

    def test_invalid_range(self):
        with pytest.raises(InvalidRange):
            try_count_verses("Genesis 1:5-1")
        with pytest.raises(InvalidRange):
            try_count_verses("Genesis 1:a-3")
        with pytest.raises(InvalidRange):
            try_count_verses("Genesis 1:3-")

    def test_oversized_range(self):
        with pytest.raises(InvalidRange):
            try_count_verses("Genesis 1:1-99999999999999999999")
        with pytest.raises(InvalidRange):
            try_count_verses(f"Genesis 1:0-{2**63 - 1}")
        assert try_count_verses(f"Genesis 1:1-{2**63 - 1}") == 2**63 - 1

    def test_invalid_verse(self):
        with pytest.raises(InvalidVerse):
            try_count_verses("Genesis 1:abc")
        with pytest.raises(InvalidVerse):
            try_count_verses("Genesis 1:")
        with pytest.raises(InvalidVerse):
            try_count_verses("Genesis 1:99999999999999999999")

    def test_cross_chapter_range_is_not_supported(self):
        # last colon wins: "3" after "2:" is a single verse
        assert try_count_verses("Genesis 1:1-2:3") == 1

    @pytest.mark.parametrize("reference", [
        "Genesis 1", "Genesis 1:abc", "Genesis 1:5-1", "", "Genesis", "Genesis 1:1-99999999999999999999",
    ])
    def test_fallback_to_one(self, reference):
        assert count_verses(reference) == 1

    def test_fallback_writes_warning(self, capsys):
        count_verses("Genesis 1:5-1")
        err = capsys.readouterr().err
        assert "Could not parse range '5-1'" in err
        assert err.rstrip().endswith("treating as 1 verse")

    def test_deterministic(self):
        assert [count_verses("Romans 8:28-39") for _ in range(3)] == [12, 12, 12]


def test_parse_verse_number():
    assert parse_verse_number("1") == 1
    assert parse_verse_number("12") == 12
    assert parse_verse_number("4a") == 4
    assert parse_verse_number("16b") == 16
    assert parse_verse_number("105") == 105
    assert parse_verse_number("a4") is None
    assert parse_verse_number("") is None
    assert parse_verse_number("\u0663") is None
    assert parse_verse_number(str(2**63 - 1)) == 2**63 - 1
    assert parse_verse_number(str(2**63)) is None
