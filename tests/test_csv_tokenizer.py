from booking_import.utils.csv_tokenizer import parse_csv_line


def test_quoted_delimiter_stays_in_field():
    assert parse_csv_line('value1,"value 2, with comma",value3') == [
        'value1', 'value 2, with comma', 'value3'
    ]


def test_doubled_quote_is_literal_quote():
    assert parse_csv_line('"He said ""hi""",b') == ['He said "hi"', 'b']


def test_fields_are_trimmed_and_empty_fields_kept():
    assert parse_csv_line(' a ,, c ') == ['a', '', 'c']


def test_tab_delimiter_ignores_commas():
    assert parse_csv_line('Sea Travel\t1,200.50\t"x\ty"', delimiter='\t') == [
        'Sea Travel', '1,200.50', 'x\ty'
    ]


def test_empty_line_yields_single_empty_field():
    assert parse_csv_line('') == ['']
