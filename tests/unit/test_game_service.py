"""Unit tests for game service."""

from io import BytesIO
from unittest.mock import MagicMock, patch

from fastapi import UploadFile
import pytest
from sqlalchemy.exc import SQLAlchemyError

from src.core.exceptions import EmptyInputError, NotFoundError
from src.services.game_service import (
    SaveResult,
    clear_all,
    delete_session,
    get_session_record,
    import_ledger_text,
    is_duplicate,
    list_sessions,
    process_uploaded_file,
    save_session,
)


def upload(filename: str | None, content: bytes = b"", content_type: str | None = None):
    file = MagicMock(spec=UploadFile)
    file.filename = filename
    file.content_type = content_type
    file.file = BytesIO(content)
    return file


class TestSaveSession:
    """Tests for save_session and duplicate detection."""

    def test_saves_new_session(self, session, two_sessions):
        """Test that a new session is stored."""
        assert save_session(session, two_sessions[0]) == SaveResult.SAVED
        session.commit()

        assert [s.session_id for s in list_sessions(session)] == ["game_1"]

    def test_same_session_id_is_duplicate(self, session, sample_game, session_factory):
        """Test that a repeated id is skipped."""
        record = session_factory("game_1", {"carol": 10, "dave": -10})

        assert is_duplicate(session, record) is True
        assert save_session(session, record) == SaveResult.DUPLICATE

    def test_same_content_is_duplicate(self, session, sample_game, two_sessions):
        """Test that the same date, winner and pot under a new id is skipped."""
        record = two_sessions[0].model_copy(update={"session_id": "game_other"})

        assert save_session(session, record) == SaveResult.DUPLICATE

    def test_different_content_is_not_duplicate(self, session, sample_game, two_sessions):
        """Test that another game on another day is stored."""
        assert is_duplicate(session, two_sessions[1]) is False


class TestGetAndDelete:
    """Tests for get_session_record, delete_session and clear_all."""

    def test_get_existing(self, session, sample_game):
        """Test fetching a stored session."""
        assert get_session_record(session, "game_1").winner_name == "alice"

    def test_get_missing_raises(self, session):
        """Test that an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError) as exc_info:
            get_session_record(session, "nope")

        assert exc_info.value.details == {"session_id": "nope"}

    def test_delete_existing(self, session, sample_game):
        """Test deleting one session."""
        delete_session(session, "game_1")

        assert list_sessions(session) == []

    def test_delete_missing_raises(self, session):
        """Test that deleting an unknown id raises NotFoundError."""
        with pytest.raises(NotFoundError):
            delete_session(session, "nope")

    def test_clear_all(self, session, two_sessions):
        """Test that clear_all removes every session and reports the count."""
        for record in two_sessions:
            save_session(session, record)
        session.commit()

        assert clear_all(session) == 2
        assert list_sessions(session) == []


class TestImportLedgerText:
    """Tests for import_ledger_text."""

    def test_parses_analyzes_and_saves(self, session, aliases, ledger_csv):
        """Test the full pipeline from CSV text to stored game."""
        result, record = import_ledger_text(session, ledger_csv, aliases, session_id="s1")
        session.commit()

        assert result == SaveResult.SAVED
        assert record.winner_name == "cs"
        assert record.winner_full_name == "Chintan Shah"
        stored = get_session_record(session, "s1")
        assert [p.full_name for p in stored.players] == ["Chintan Shah", "kd", "Gaurav Jain"]
        assert stored.total_pot == pytest.approx(3000)

    def test_second_import_is_duplicate(self, session, aliases, ledger_csv):
        """Test that importing the same ledger twice skips the second."""
        import_ledger_text(session, ledger_csv, aliases)
        result, _ = import_ledger_text(session, ledger_csv, aliases)

        assert result == SaveResult.DUPLICATE

    def test_empty_ledger_raises(self, session, aliases):
        """Test that empty text is rejected before anything is stored."""
        with pytest.raises(EmptyInputError):
            import_ledger_text(session, "", aliases)


class TestProcessUploadedFile:
    """Tests for process_uploaded_file."""

    def test_missing_filename_returns_error(self, session, aliases):
        """Test that missing filename returns error status."""
        result = process_uploaded_file(session, upload(None), aliases)

        assert result.status == "error"
        assert result.filename == "unknown"
        assert "filename" in result.message.lower()

    def test_json_file_returns_error(self, session, aliases):
        """Test that JSON uploads are pointed at the PokerNow CSV export."""
        result = process_uploaded_file(session, upload("backup.json", b"{}"), aliases)

        assert result.status == "error"
        assert "JSON files are not supported" in result.message

    def test_non_csv_file_returns_error(self, session, aliases):
        """Test that non-CSV file returns error status."""
        result = process_uploaded_file(session, upload("test.txt", b"x"), aliases)

        assert result.status == "error"
        assert result.filename == "test.txt"
        assert "CSV" in result.message

    def test_csv_content_type_is_accepted(self, session, aliases, ledger_csv):
        """Test that a text/csv upload without the extension is accepted."""
        file = upload("export", ledger_csv.encode(), content_type="text/csv")

        result = process_uploaded_file(session, file, aliases)

        assert result.status == "success"

    def test_successful_upload(self, session, aliases, ledger_csv):
        """Test that a valid ledger is imported with a generated id."""
        file = upload("ledger.csv", ledger_csv.encode("utf-8"))

        result = process_uploaded_file(session, file, aliases)

        assert result.status == "success"
        assert result.message == "Successfully imported"
        assert result.session_id is not None
        assert result.session_id.startswith("game_")
        stored = get_session_record(session, result.session_id)
        assert stored.ledger_filename == "ledger.csv"

    def test_bom_is_stripped(self, session, aliases, ledger_csv):
        """Test that a UTF-8 BOM from spreadsheet exports is ignored."""
        file = upload("ledger.csv", ledger_csv.encode("utf-8-sig"))

        result = process_uploaded_file(session, file, aliases)

        assert result.status == "success"

    def test_duplicate_upload_is_skipped(self, session, aliases, ledger_csv):
        """Test that uploading the same ledger twice skips the second."""
        process_uploaded_file(session, upload("a.csv", ledger_csv.encode()), aliases)

        result = process_uploaded_file(session, upload("b.csv", ledger_csv.encode()), aliases)

        assert result.status == "skipped"
        assert result.message == "Game already exists"
        assert len(list_sessions(session)) == 1

    def test_header_only_file_returns_error(self, session, aliases):
        """Test that a ledger without data rows is reported, not raised."""
        file = upload("empty.csv", b"player_nickname,buy_in,buy_out,net\n")

        result = process_uploaded_file(session, file, aliases)

        assert result.status == "error"
        assert result.message.startswith("Ledger needs a header row")

    def test_no_players_returns_error(self, session, aliases):
        """Test that rows without nicknames are reported."""
        file = upload("blank.csv", b"player_nickname,net\n,10\n,20")

        result = process_uploaded_file(session, file, aliases)

        assert result.status == "error"
        assert result.message.startswith("No valid game data found")

    def test_undecodable_file_returns_error(self, session, aliases):
        """Test that a non UTF-8 file is reported."""
        result = process_uploaded_file(session, upload("bad.csv", b"\xff\xfe\x00"), aliases)

        assert result.status == "error"
        assert "Failed to read file" in result.message

    def test_database_error_returns_error(self, session, aliases, ledger_csv):
        """Test that a database failure is reported and rolled back."""
        file = upload("ledger.csv", ledger_csv.encode())

        with patch(
            "src.services.game_service.save_session",
            side_effect=SQLAlchemyError("boom"),
        ):
            result = process_uploaded_file(session, file, aliases)

        assert result.status == "error"
        assert "Failed to import ledger" in result.message
