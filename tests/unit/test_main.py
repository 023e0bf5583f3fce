"""Unit tests for the operator entry point helpers"""

import csv

from culture_pulse.sheets.transformer import BASE_COLUMNS
from main import export_csv


class TestExportCsv:
    """Test CSV export of the archive"""

    def test_rows_are_oldest_first(self, archive, tmp_path):
        first = archive.save_submission({"winsText": "first"}).submission_id
        second = archive.save_submission({"winsText": "second"}).submission_id

        count = export_csv(archive, str(tmp_path / "out.csv"))

        with open(tmp_path / "out.csv", newline="", encoding="utf-8") as f:
            rows = list(csv.DictReader(f))
        assert count == 2
        assert [row["submissionId"] for row in rows] == [first, second]
        assert rows[0]["winsText"] == "first"

    def test_leader_columns_are_widened(self, archive, complete_state, tmp_path):
        archive.save_submission({})
        archive.save_submission(complete_state)

        export_csv(archive, str(tmp_path / "out.csv"))

        with open(tmp_path / "out.csv", newline="", encoding="utf-8") as f:
            reader = csv.reader(f)
            headers = next(reader)
            rows = list(reader)
        assert headers[:len(BASE_COLUMNS)] == BASE_COLUMNS
        assert "feedback_Fahim_clarity" in headers
        column = headers.index("feedback_Fahim_clarity")
        assert rows[0][column] == ""
        assert rows[1][column] == "9/10"
