from __future__ import annotations

from pathlib import Path

import pytest

from booking_import.data_loader import (
    detect_delimiter,
    load_import_file,
    load_reference_data,
    parse_import_text,
    read_import_file,
)


def test_detect_delimiter_prefers_tab_only_when_strictly_more():
    assert detect_delimiter('a\tb\tc') == '\t'
    assert detect_delimiter('a,b,c') == ','
    assert detect_delimiter('a\tb,c') == ','


def test_headers_are_normalized_and_bom_stripped():
    table = parse_import_text('\ufeffClient Name,  Booking   Ref No ,Yacht\nJohn,R-1,Lotus\n')
    assert table.headers == ['client_name', 'booking_ref_no', 'yacht']
    assert table.delimiter == ','
    assert len(table.rows) == 1
    assert table.rows[0].line_number == 2
    assert table.rows[0].cells == ('John', 'R-1', 'Lotus')


def test_blank_tail_cells_are_truncated_and_accepted():
    table = parse_import_text('a,b\nx,y,,\n')
    assert table.rows[0].cells == ('x', 'y')
    assert table.skipped_rows == 0


def test_malformed_rows_are_skipped_and_counted():
    table = parse_import_text('a,b,c\n1,2,3\nonly-one\n4,5,6,7\n\n8,9,10\n')
    assert [r.line_number for r in table.rows] == [2, 6]
    assert table.skipped_rows == 2
    assert any(message.startswith('Line 3:') for message in table.diagnostics)
    assert any(message.startswith('Line 4:') for message in table.diagnostics)


def test_crlf_line_endings():
    table = parse_import_text('a,b\r\n1,2\r\n3,4\r\n')
    assert [r.cells for r in table.rows] == [('1', '2'), ('3', '4')]


@pytest.mark.parametrize('text', ['', '   \n\n', 'Client Name,Yacht\n'])
def test_empty_or_header_only_file_is_fatal(text):
    with pytest.raises(ValueError):
        parse_import_text(text)


def test_missing_import_file(tmp_path: Path):
    with pytest.raises(FileNotFoundError):
        read_import_file(str(tmp_path / 'missing.csv'))


def test_load_import_file_reads_utf8(tmp_path: Path):
    path = tmp_path / 'export.csv'
    path.write_text('\ufeffClient,Yacht\nZoë,Lotus Royale\n', encoding='utf-8')
    table = load_import_file(str(path))
    assert table.headers == ['client', 'yacht']
    assert table.rows[0].cells == ('Zoë', 'Lotus Royale')


def test_load_reference_data(reference_file: Path):
    reference = load_reference_data(str(reference_file))
    assert reference.agent_map['a-1'] == 'Baseet Tourism LLC'
    assert reference.find_yacht('lotus royale').id == 'y-lotus'
    assert reference.find_yacht('y-oe').name == 'Ocean Empress'
    assert len(reference.find_yacht('y-dhow').packages) == 4
    assert reference.bookings[0].transaction_id == 'TRN-2026-00007'
    assert reference.users == {'u-1': 'Sales Admin'}


def test_malformed_reference_data(tmp_path: Path):
    path = tmp_path / 'bad.json'
    path.write_text('{"agents": [{"name": "No Id"}]}', encoding='utf-8')
    with pytest.raises(ValueError):
        load_reference_data(str(path))

    path.write_text('{not json', encoding='utf-8')
    with pytest.raises(ValueError):
        load_reference_data(str(path))
