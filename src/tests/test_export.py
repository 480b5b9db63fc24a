"""Tests for CSV export utilities."""
from django.http import HttpResponse

from core.export import csv_download, rows_to_csv


class TestRowsToCsv:
    def test_single_row(self):
        assert rows_to_csv([{"a": 1, "b": "x"}]) == "a,b\n1,x"

    def test_empty_input(self):
        assert rows_to_csv([]) == ""

    def test_header_from_first_row(self):
        text = rows_to_csv([{"name": "A", "days": 2}, {"name": "B", "days": 3}])
        assert text.split("\n") == ["name,days", "A,2", "B,3"]

    def test_fields_with_delimiter_and_quotes_are_escaped(self):
        text = rows_to_csv([{"reason": 'Trip, "urgent"', "n": 1}])
        assert text == 'reason,n\n"Trip, ""urgent""",1'

    def test_none_becomes_empty(self):
        assert rows_to_csv([{"a": None, "b": 0}]) == "a,b\n,0"


def test_csv_download_is_an_attachment():
    resp = csv_download([{"a": 1}], "report.csv")
    assert isinstance(resp, HttpResponse)
    assert resp["Content-Type"] == "text/csv; charset=utf-8"
    assert 'filename="report.csv"' in resp["Content-Disposition"]
    assert resp.content.decode() == "a\n1"
