"""Tests for the command-line interface."""

import json

import pytest

from shiftboard.cli import create_sample_records, load_records, main
from shiftboard.errors import ShiftboardError


@pytest.fixture
def shifts_file(tmp_path):
    path = tmp_path / "shifts.json"
    path.write_text(json.dumps([
        {"date": "2025-05-10", "user": "a@x.com", "displayName": "Alice", "times": ["11:00", "11:30"]},
        {"date": "2025-05-03", "user": "b@x.com", "displayName": "Bob", "times": ["15:00"]},
        {"date": "2025-06-01", "user": "c@x.com", "times": ["13:00"]},
    ]), encoding="utf-8")
    return path


class TestLoadRecords:
    """Tests for load_records."""

    def test_loads_documents(self, shifts_file):
        records = load_records(str(shifts_file))
        assert len(records) == 3
        assert records[0].display_name == "Alice"

    def test_rejects_non_list(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text('{"date": "2025-05-10"}', encoding="utf-8")
        with pytest.raises(ShiftboardError):
            load_records(str(path))


class TestSampleRecords:
    """Tests for create_sample_records."""

    def test_records_inside_month(self):
        records = create_sample_records(2025, 2, count=4)
        assert records
        assert all(r.date.startswith("2025-02-") for r in records)
        assert max(r.date for r in records) == "2025-02-28"

    def test_days_limit(self):
        records = create_sample_records(2025, 5, count=3, days=2)
        assert {r.date for r in records} == {"2025-05-01", "2025-05-02"}

    def test_deterministic(self):
        assert create_sample_records(2025, 5, 6, 7) == create_sample_records(2025, 5, 6, 7)


class TestMain:
    """Tests for the CLI entry point."""

    def test_no_command(self, capsys):
        assert main([]) == 1

    def test_render(self, shifts_file, tmp_path, capsys):
        output = tmp_path / "out.png"
        assert main(["render", str(shifts_file), "-y", "2025", "-m", "5", "-o", str(output)]) == 0
        assert output.read_bytes().startswith(b"\x89PNG")
        assert "Rendered 2 shifts" in capsys.readouterr().out

    def test_render_as_is_keeps_every_record(self, shifts_file, tmp_path, capsys):
        output = tmp_path / "out.png"
        assert main(["render", str(shifts_file), "-y", "2025", "-m", "5", "-o", str(output), "--as-is"]) == 0
        assert "Rendered 3 shifts" in capsys.readouterr().out

    def test_pdf(self, shifts_file, tmp_path):
        output = tmp_path / "out.pdf"
        assert main(["pdf", str(shifts_file), "-y", "2025", "-m", "5", "-o", str(output)]) == 0
        assert output.read_bytes().startswith(b"%PDF-")

    def test_report_to_stdout(self, shifts_file, capsys):
        assert main(["report", str(shifts_file), "-y", "2025", "-m", "5"]) == 0
        out = capsys.readouterr().out
        assert "SHIFT COVERAGE REPORT - 2025-05" in out
        assert "2025-06-01" not in out

    def test_validate(self, shifts_file, capsys):
        assert main(["validate", str(shifts_file)]) == 0
        assert main(["validate", str(shifts_file), "-y", "2025", "-m", "5"]) == 1
        assert "date_outside_month" in capsys.readouterr().out

    def test_demo(self, tmp_path, capsys):
        output = tmp_path / "demo.png"
        assert main(["demo", "-y", "2025", "-m", "5", "--days", "3", "-o", str(output)]) == 0
        assert output.exists()
        assert "SHIFT COVERAGE REPORT" in capsys.readouterr().out

    def test_invalid_month_rejected(self, shifts_file):
        with pytest.raises(SystemExit):
            main(["render", str(shifts_file), "-y", "2025", "-m", "13"])

    def test_error_reported(self, tmp_path, capsys):
        path = tmp_path / "bad.json"
        path.write_text("{}", encoding="utf-8")
        assert main(["render", str(path), "-y", "2025", "-m", "5", "-o", str(tmp_path / "x.png")]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_missing_input_file(self, tmp_path, capsys):
        missing = tmp_path / "missing.json"
        assert main(["report", str(missing), "-y", "2025", "-m", "5"]) == 1
        assert "Error:" in capsys.readouterr().err

    def test_send_image_without_webhook(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("DISCORD_WEBHOOK_URL", raising=False)
        env_file = tmp_path / ".env.local"
        assert main(["send-image", "-y", "2025", "-m", "5", "--env-file", str(env_file)]) == 1
        assert "DISCORD_WEBHOOK_URL" in capsys.readouterr().err

    def test_encode_key(self, tmp_path, capsys):
        env_file = tmp_path / ".env.local"
        env_file.write_text("FIREBASE_PRIVATE_KEY=abc\n", encoding="utf-8")
        assert main(["encode-key", "--env-file", str(env_file)]) == 0
        assert "YWJj" in capsys.readouterr().out

    def test_encode_key_missing(self, tmp_path, monkeypatch, capsys):
        monkeypatch.delenv("FIREBASE_PRIVATE_KEY", raising=False)
        assert main(["encode-key", "--env-file", str(tmp_path / "missing.env")]) == 1
