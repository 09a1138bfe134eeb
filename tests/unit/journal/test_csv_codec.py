"""Tests for the CSV backup codec."""
import pytest

from mindnote.journal.csv_codec import (
    BOM,
    HEADER,
    clean_value,
    encode_row,
    export_records,
    header_matches,
    iter_rows,
    kind_from_label,
    parse_records,
    parse_row,
    split_fields,
)
from mindnote.journal.models import RecordKind


def _comparable(record):
    """User-editable fields of a Record, as parse_records returns them."""
    return {
        "date": record.date,
        "kind": record.kind,
        "title": record.title,
        "content": record.content,
        "mood": record.mood,
        "tags": list(record.tags),
    }


class TestExport:
    """Tests for export_records and encode_row."""

    def test_header_and_bom(self):
        """An empty collection should still produce the BOM and header."""
        assert export_records([]) == BOM + ",".join(HEADER)

    def test_row_layout(self, make_record):
        """Rows should quote text fields, leave mood empty and join tags."""
        record = make_record(
            "2024-05-01",
            RecordKind.BRAIN_DUMP,
            id="r1",
            title="Tabs",
            content="Too many",
            tags=["work", "focus"],
        )
        assert encode_row(record) == 'r1,2024-05-01,브레인 덤프,"Tabs","Too many",,work,focus'

    def test_english_labels(self, make_record):
        """The en locale should write English type labels."""
        record = make_record(kind=RecordKind.EMOTION, id="r1", mood=5)
        assert ",Emotion Log," in encode_row(record, locale="en")

    def test_rows_joined_with_newline_in_order(self, make_record):
        """Rows should follow input order, joined with \\n and no trailing newline."""
        first = make_record("2024-05-02", id="a")
        second = make_record("2024-05-01", id="b")

        lines = export_records([first, second]).split("\n")

        assert len(lines) == 3
        assert lines[1].startswith("a,")
        assert lines[2].startswith("b,")

    def test_deterministic(self, sample_records):
        """The same input should always give the same text."""
        assert export_records(sample_records) == export_records(sample_records)


class TestRoundTrip:
    """Export followed by import should preserve user-visible fields."""

    def test_simple_records_round_trip(self, make_record):
        """Records without commas in tags should survive export/import."""
        records = [
            make_record("2024-05-01", RecordKind.MORNING_PAGE, title="Morning", content="Pages"),
            make_record("2024-05-02", RecordKind.EMOTION, title="Calm", mood=3, tags=["tea"]),
            make_record("2024-05-03", RecordKind.BRAIN_DUMP, content="a, b, c"),
            make_record(
                "2024-05-04",
                RecordKind.RETROSPECTIVE,
                content="## Keep\nx\n\n## Problem\ny\n\n## Try\nz",
            ),
        ]

        parsed = parse_records(export_records(records))

        assert parsed.skipped == 0
        assert parsed.records == [_comparable(r) for r in records]

    def test_embedded_quotes(self, make_record):
        """Inner quotes should be doubled on export and restored on import."""
        record = make_record(title='He said "hi"', content='"quoted" start')
        text = export_records([record])

        assert '"He said ""hi"""' in text
        parsed = parse_records(text)
        assert parsed.records[0]["title"] == 'He said "hi"'
        assert parsed.records[0]["content"] == '"quoted" start'

    def test_multiline_content(self, make_record):
        """Newlines inside content should not split the row."""
        record = make_record(content="line one\nline two\n\nline four")
        parsed = parse_records(export_records([record]))

        assert parsed.records[0]["content"] == "line one\nline two\n\nline four"


class TestImport:
    """Tests for parse_records and its helpers."""

    def test_sample_document(self, sample_csv):
        """The sample backup should give two records and one skipped row."""
        parsed = parse_records(sample_csv)

        assert parsed.count == 2
        assert parsed.skipped == 1

        emotion, morning = parsed.records
        assert emotion == {
            "date": "2024-05-01",
            "kind": RecordKind.EMOTION,
            "title": "Sunny",
            "content": 'Felt "great" today',
            "mood": 4,
            "tags": ["walk", "sun"],
        }
        assert morning["kind"] is RecordKind.MORNING_PAGE
        assert morning["content"] == "Pages\nwith two lines"
        assert morning["mood"] is None
        assert morning["tags"] == []

    def test_short_row_skipped_rest_imported(self):
        """A row with three tokens should be skipped without failing the file."""
        text = (
            "ID,Date,Type,Title,Content,Mood,Tags\n"
            "x,y,z\n"
            'r1,2024-05-01,회고,"t","c",,\n'
        )
        parsed = parse_records(text)

        assert parsed.count == 1
        assert parsed.skipped == 1
        assert parsed.records[0]["kind"] is RecordKind.RETROSPECTIVE

    def test_stray_quote_does_not_swallow_later_rows(self):
        """An unbalanced quote should cost only its own row."""
        text = (
            "ID,Date,Type,Title,Content,Mood,Tags\n"
            'r1,2024-05-01,회고,He is 5" tall,c,3,\n'
            'r2,2024-05-02,회고,"t2","c2",,\n'
            'r3,2024-05-03,회고,"t3","c3",,\n'
        )
        parsed = parse_records(text)

        assert [r["title"] for r in parsed.records] == ["t2", "t3"]
        assert parsed.skipped == 1

    def test_multiline_row_before_stray_quote(self):
        """Closed multi-line fields before a stray quote should still parse."""
        text = (
            "ID,Date,Type,Title,Content,Mood,Tags\n"
            'r1,2024-05-01,모닝 페이지,"t1","line one\nline two",,\n'
            'r2,2024-05-02,회고,5" tall,c,,\n'
            'r3,2024-05-03,회고,"t3","c3",,\r\n'
        )
        parsed = parse_records(text)

        assert [r["content"] for r in parsed.records] == ["line one\nline two", "c3"]
        assert parsed.skipped == 1

    def test_unknown_label_becomes_brain_dump(self):
        """An unrecognized Type label should import as BrainDump."""
        text = 'ID,Date,Type,Title,Content,Mood,Tags\nr1,2024-05-01,Unknown,"t","c",,\n'
        assert parse_records(text).records[0]["kind"] is RecordKind.BRAIN_DUMP

    def test_invalid_date_row_skipped(self):
        """A row whose date is not a calendar date should be skipped."""
        text = 'ID,Date,Type,Title,Content,Mood,Tags\nr1,2024-02-30,회고,"t","c",,\n'
        parsed = parse_records(text)

        assert parsed.count == 0
        assert parsed.skipped == 1

    def test_mood_dropped_for_non_emotion(self):
        """A mood on a non-Emotion row should not be kept."""
        text = 'ID,Date,Type,Title,Content,Mood,Tags\nr1,2024-05-01,모닝 페이지,"t","c",4,\n'
        assert parse_records(text).records[0]["mood"] is None

    @pytest.mark.parametrize("mood", ["0", "6", "abc", ""])
    def test_invalid_mood_absent(self, mood):
        """Out-of-range or non-numeric moods should import as absent."""
        text = f'ID,Date,Type,Title,Content,Mood,Tags\nr1,2024-05-01,감정 일지,"t","c",{mood},\n'
        assert parse_records(text).records[0]["mood"] is None

    def test_five_token_row(self):
        """A row without Mood and Tags columns should still import."""
        text = 'ID,Date,Type,Title,Content\nr1,2024-05-01,감정 일지,"t","c"'
        record = parse_records(text).records[0]

        assert record["mood"] is None
        assert record["tags"] == []

    def test_crlf_and_blank_rows(self):
        """Windows line endings and blank lines should be tolerated."""
        text = (
            "ID,Date,Type,Title,Content,Mood,Tags\r\n"
            "\r\n"
            'r1,2024-05-01,감정 일지,"t","c",2,\r\n'
        )
        parsed = parse_records(text)

        assert parsed.count == 1
        assert parsed.skipped == 0
        assert parsed.records[0]["mood"] == 2

    def test_header_only(self):
        """A header without data rows should parse to nothing."""
        parsed = parse_records(BOM + ",".join(HEADER))
        assert parsed.count == 0
        assert parsed.skipped == 0

    def test_label_rules(self):
        """Labels should map by substring, first rule wins."""
        assert kind_from_label("모닝 페이지") is RecordKind.MORNING_PAGE
        assert kind_from_label("나의 감정") is RecordKind.EMOTION
        assert kind_from_label("주간 회고") is RecordKind.RETROSPECTIVE
        assert kind_from_label("Morning Page") is RecordKind.MORNING_PAGE
        assert kind_from_label("브레인 덤프") is RecordKind.BRAIN_DUMP
        assert kind_from_label("") is RecordKind.BRAIN_DUMP

    def test_split_fields_keeps_quotes(self):
        """Quotes should stay in tokens and protect commas."""
        assert split_fields('a,"b,c",d') == ["a", '"b,c"', "d"]

    def test_clean_value(self):
        """clean_value should strip one quote per end and unescape."""
        assert clean_value('"He said ""hi"""') == 'He said "hi"'
        assert clean_value("plain") == "plain"
        assert clean_value('""') == ""

    def test_iter_rows_respects_quotes(self):
        """Newlines inside quotes should stay in the row."""
        assert list(iter_rows('a,"b\nc"\nd')) == ['a,"b\nc"', "d"]

    def test_iter_rows_unclosed_quote_falls_back_to_lines(self):
        """Rows from an unclosed quote onward should be split per line."""
        assert list(iter_rows('h\na"b\nc\r\nd\n')) == ["h", 'a"b', "c", "d"]

    def test_parse_row_too_short(self):
        """parse_row should return None for fewer than five tokens."""
        assert parse_row("a,2024-05-01,회고,t") is None

    def test_header_matches(self, sample_csv):
        """header_matches should recognize the export header with or without BOM."""
        assert header_matches(sample_csv)
        assert header_matches(",".join(HEADER))
        assert not header_matches("Date,Title\n")
