"""Unit tests for the local submission archive"""

import json
import re
from unittest.mock import MagicMock

from culture_pulse.config import SUBMISSIONS_KEY
from culture_pulse.memory.archive import SubmissionArchive, new_session_id, new_submission_id
from culture_pulse.memory.models import FormState


class TestIds:
    """Test id generation"""

    def test_submission_id_format(self):
        assert re.fullmatch(r"qpt-\d+-[0-9a-z]{9}", new_submission_id())

    def test_session_id_format(self):
        assert re.fullmatch(r"session-\d+", new_session_id())


class TestSaveSubmission:
    """Test archiving submissions"""

    def test_save_returns_id_and_stores_form(self, archive, complete_state):
        response = archive.save_submission(complete_state, completion_percentage=100)

        assert response.success is True
        assert response.submission_id.startswith("qpt-")

        saved = archive.get_submission(response.submission_id)
        assert saved.form == complete_state
        assert saved.completion_percentage == 100

    def test_newest_first(self, archive):
        first = archive.save_submission({"winsText": "first"}).submission_id
        second = archive.save_submission({"winsText": "second"}).submission_id

        ids = [s.submission_id for s in archive.get_all_submissions()]

        assert ids == [second, first]

    def test_archive_is_capped(self, storage):
        archive = SubmissionArchive(storage, max_submissions=2)
        for text in ("a", "b", "c"):
            archive.save_submission({"winsText": text})

        submissions = archive.get_all_submissions()

        assert [s.form.wins_text for s in submissions] == ["c", "b"]

    def test_stored_layout_is_camel_case(self, storage, archive):
        archive.save_submission(FormState(culture_text="trust"))

        raw = json.loads(storage.get_item(SUBMISSIONS_KEY))

        assert raw[0]["form"]["cultureText"] == "trust"
        assert "submissionId" in raw[0]

    def test_write_failure_returns_error_response(self):
        storage = MagicMock()
        storage.get_item.return_value = None
        storage.set_item.side_effect = OSError("disk full")

        response = SubmissionArchive(storage).save_submission({})

        assert response.success is False
        assert "disk full" in response.error


class TestReadArchive:
    """Test tolerant reads"""

    def test_malformed_json_reads_as_empty(self, storage, archive):
        storage.set_item(SUBMISSIONS_KEY, "[{broken")

        assert archive.get_all_submissions() == []

    def test_non_list_reads_as_empty(self, storage, archive):
        storage.set_item(SUBMISSIONS_KEY, json.dumps({"submissionId": "x"}))

        assert archive.get_all_submissions() == []

    def test_unreadable_entries_are_skipped(self, storage, archive):
        storage.set_item(SUBMISSIONS_KEY, json.dumps([
            {"submissionId": "qpt-1", "sessionId": "session-1", "form": {"winsText": "ok"}},
            {"nothing": "useful"},
        ]))

        submissions = archive.get_all_submissions()

        assert [s.submission_id for s in submissions] == ["qpt-1"]
        assert submissions[0].form.wins_text == "ok"

    def test_save_refuses_to_overwrite_unreadable_archive(self, storage, archive):
        """Test a truncated archive is left intact and the save reports failure"""
        archive.save_submission({"winsText": "a"})
        archive.save_submission({"winsText": "b"})
        archive.save_submission({"winsText": "c"})
        truncated = storage.get_item(SUBMISSIONS_KEY)[:-20]
        storage.set_item(SUBMISSIONS_KEY, truncated)

        response = archive.save_submission({"winsText": "d"})

        assert response.success is False
        assert response.error
        assert storage.get_item(SUBMISSIONS_KEY) == truncated

    def test_save_refuses_non_list_archive(self, storage, archive):
        storage.set_item(SUBMISSIONS_KEY, json.dumps({"submissionId": "x"}))

        response = archive.save_submission({})

        assert response.success is False
        assert json.loads(storage.get_item(SUBMISSIONS_KEY)) == {"submissionId": "x"}

    def test_save_keeps_unreadable_entries(self, storage, archive):
        storage.set_item(SUBMISSIONS_KEY, json.dumps([{"legacy": True}]))

        response = archive.save_submission({})

        raw = json.loads(storage.get_item(SUBMISSIONS_KEY))
        assert response.success is True
        assert raw[0]["submissionId"] == response.submission_id
        assert raw[1] == {"legacy": True}

    def test_delete_refuses_unreadable_archive(self, storage, archive):
        storage.set_item(SUBMISSIONS_KEY, "[{broken")

        assert archive.delete_submission("qpt-1").success is False
        assert storage.get_item(SUBMISSIONS_KEY) == "[{broken"


class TestManageArchive:
    """Test delete, clear, export and stats"""

    def test_delete_submission(self, archive):
        keep = archive.save_submission({}).submission_id
        drop = archive.save_submission({}).submission_id

        assert archive.delete_submission(drop).success is True
        assert [s.submission_id for s in archive.get_all_submissions()] == [keep]
        assert archive.get_submission(drop) is None

    def test_clear_all_submissions(self, archive):
        archive.save_submission({})

        assert archive.clear_all_submissions().success is True
        assert archive.get_all_submissions() == []

    def test_export_is_pretty_json(self, archive):
        submission_id = archive.save_submission({"noteText": "thanks"}).submission_id

        exported = archive.export_submissions()

        assert "\n  " in exported
        assert json.loads(exported)[0]["submissionId"] == submission_id

    def test_stats_for_empty_archive(self, archive):
        stats = archive.get_storage_stats()

        assert stats["total_submissions"] == 0
        assert stats["oldest_submission"] is None
        assert stats["newest_submission"] is None

    def test_stats_report_count_and_range(self, archive):
        archive.save_submission({})
        archive.save_submission({})
        submissions = archive.get_all_submissions()

        stats = archive.get_storage_stats()

        assert stats["total_submissions"] == 2
        assert stats["storage_size"] > 0
        assert stats["newest_submission"] == submissions[0].timestamp
        assert stats["oldest_submission"] == submissions[-1].timestamp
