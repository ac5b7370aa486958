import pytest

from wippf_engine.csv_importer import (
    ColumnMapping,
    ParsedTable,
    clamp_score,
    extract_answers,
    import_results,
    parse_int,
    parse_table,
    preview,
    suggest_names,
)

TWO_PERSON_CSV = (
    "Question;Anna;Ben\r\n"
    "1;4;1\r\n"
    "2;2;3\r\n"
    "\r\n"
    "70;3;4\r\n"
)


# --- Parsing ---

def test_parse_table_splits_rows_and_cells():
    table = parse_table("q, a ,b\n1,2;3\n")
    assert table.header == ["q", "a", "b"]
    assert table.rows == [["1", "2", "3"]]


def test_parse_table_drops_blank_rows():
    table = parse_table("h1,h2\n\n , \n1,2\n;;\n")
    assert table.rows == [["1", "2"]]


def test_parse_table_handles_crlf():
    table = parse_table(TWO_PERSON_CSV)
    assert table.header == ["Question", "Anna", "Ben"]
    assert len(table.rows) == 3


@pytest.mark.parametrize("raw", ["", "\n\n", " ; \r\n", None])
def test_parse_table_empty_input(raw):
    table = parse_table(raw)
    assert table.is_empty
    assert table.rows == []


def test_parse_table_decodes_bytes_with_bom():
    table = parse_table("\ufeffq,score\n1,4\n".encode("utf-8"))
    assert table.header == ["q", "score"]


def test_parse_table_undecodable_bytes_give_empty_table():
    assert parse_table(b"\xff\xfe\xfa").is_empty


def test_header_only_table_is_not_empty():
    table = parse_table("q,score")
    assert not table.is_empty
    assert table.rows == []


@pytest.mark.parametrize("cell, expected", [
    ("3", 3), ("+2", 2), ("-1", -1), ("3.7", 3), ("12 pts", 12), ("007", 7),
    ("abc", None), ("", None), ("x3", None), (None, None), ("\u0663", None), ("1\u0663", 1),
])
def test_parse_int(cell, expected):
    assert parse_int(cell) == expected


@pytest.mark.parametrize("value, expected", [(-5, 1), (0, 1), (1, 1), (3, 3), (4, 4), (9, 4)])
def test_clamp_score(value, expected):
    assert clamp_score(value) == expected


# --- Mapping ---

def test_mapping_readiness():
    assert not ColumnMapping().is_ready()
    assert not ColumnMapping(question_column=0).is_ready()
    assert not ColumnMapping(score_columns=[1]).is_ready()
    assert not ColumnMapping(question_column=1, score_columns=[1]).is_ready()
    assert not ColumnMapping(question_column=-1, score_columns=[1]).is_ready()
    assert not ColumnMapping(question_column=0, score_columns=[-1]).is_ready()
    assert not ColumnMapping(question_column=0, score_columns=[1, 1]).is_ready()
    assert ColumnMapping(question_column=0, score_columns=[1, 2]).is_ready()


def test_mapping_names_fall_back_to_column_index():
    mapping = ColumnMapping(question_column=0, score_columns=[1, 2], names={1: "Anna", 2: "   "})
    assert mapping.name_for(1) == "Anna"
    assert mapping.name_for(2) == "Person 2"
    assert mapping.name_for(3) == "Person 3"


def test_suggest_names_skips_blank_headers():
    table = parse_table("Question,,Ben\n1,2,3")
    assert suggest_names(table, [0, 1, 2, 5]) == {0: "Question", 2: "Ben"}


def test_preview():
    text = "q,s\n" + "\n".join(f"{i},1" for i in range(1, 9))
    summary = preview(parse_table(text), limit=5)
    assert summary["header"] == ["q", "s"]
    assert len(summary["rows"]) == 5
    assert summary["remaining_rows"] == 3
    assert summary["column_count"] == 2


# --- Extraction ---

def test_extract_answers_clamps_and_skips():
    table = ParsedTable(header=["q", "s"], rows=[["1", "9"], ["2", "0"], ["3", "abc"], ["x", "2"], ["4", "3"]])
    assert extract_answers(table, 0, 1) == {1: 4, 2: 1, 4: 3}


def test_extract_answers_short_rows_are_skipped():
    table = ParsedTable(header=["q", "a", "b"], rows=[["1", "2"], ["2", "3", "4"]])
    assert extract_answers(table, 0, 2) == {2: 4}


def test_extract_answers_later_rows_overwrite():
    table = ParsedTable(header=["q", "s"], rows=[["1", "2"], ["1", "3"]])
    assert extract_answers(table, 0, 1) == {1: 3}


# --- Import ---

def test_import_two_people(engine):
    table = parse_table(TWO_PERSON_CSV)
    mapping = ColumnMapping(question_column=0, score_columns=[1, 2], names={1: "Anna"})
    results = import_results(table, mapping, engine)

    assert [r.name for r in results] == ["Anna", "Person 2"]
    anna, ben = results
    assert anna.answers == {1: 4, 2: 2, 70: 3}
    assert ben.answers == {1: 1, 2: 3, 70: 4}
    assert anna.scores["1"] == 6
    assert anna.scores["24m"] == 3
    assert anna.macro.social.active == 4
    assert anna.macro.social.passive == 2
    assert ben.scores["1"] == 4
    assert anna.id != ben.id


def test_import_columns_are_independent(engine):
    clean = "q,a,b\n1,4,2\n2,3,3\n"
    corrupted = "q,a,b\n1,4,abc\n2,3,17\n"
    mapping = ColumnMapping(question_column=0, score_columns=[1, 2])

    clean_a, clean_b = import_results(parse_table(clean), mapping, engine)
    dirty_a, dirty_b = import_results(parse_table(corrupted), mapping, engine)

    assert dirty_a.answers == clean_a.answers
    assert dirty_a.scores == clean_a.scores
    assert dirty_a.macro == clean_a.macro
    assert dirty_b.answers == {2: 4}


def test_import_clamping_example(engine):
    table = parse_table("q,s\n1,9\n2,0\n3,abc\n")
    mapping = ColumnMapping(question_column=0, score_columns=[1])
    (result,) = import_results(table, mapping, engine)
    assert result.answers == {1: 4, 2: 1}


@pytest.mark.parametrize("mapping", [
    ColumnMapping(),
    ColumnMapping(question_column=0),
    ColumnMapping(score_columns=[1]),
    ColumnMapping(question_column=-1, score_columns=[1]),
    ColumnMapping(question_column=0, score_columns=[2, 1, 2]),
])
def test_import_blocked_without_complete_mapping(engine, mapping):
    assert import_results(parse_table(TWO_PERSON_CSV), mapping, engine) == []


def test_import_empty_table_gives_nothing(engine):
    mapping = ColumnMapping(question_column=0, score_columns=[1])
    assert import_results(parse_table(""), mapping, engine) == []


def test_import_header_only_gives_empty_answer_sets(engine):
    mapping = ColumnMapping(question_column=0, score_columns=[1])
    (result,) = import_results(parse_table("q,s"), mapping, engine)
    assert result.answers == {}
    assert all(v == 0 for v in result.scores.values())
