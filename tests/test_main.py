from __future__ import annotations

from main import get_next_available_filename


def test_free_name_is_kept(tmp_path):
    target = tmp_path / 'review.xlsx'
    assert get_next_available_filename(str(target)) == str(target)


def test_existing_names_get_a_counter(tmp_path):
    target = tmp_path / 'review.xlsx'
    target.touch()
    assert get_next_available_filename(str(target)) == str(tmp_path / 'review_1.xlsx')

    (tmp_path / 'review_1.xlsx').touch()
    assert get_next_available_filename(str(target)) == str(tmp_path / 'review_2.xlsx')


def test_name_without_suffix(tmp_path):
    target = tmp_path / 'review'
    target.touch()
    assert get_next_available_filename(str(target)) == str(tmp_path / 'review_1')
