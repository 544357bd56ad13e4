"""Tests for the pagesim command line runner."""

import pytest

from cli import main


@pytest.fixture
def trace_file(tmp_path):
    path = tmp_path / "trace.txt"
    path.write_text("R:1 W:2 R:3 W:2 W:4 R:4 R:4 R:5\n")
    return str(path)


class TestRuns:
    """Verify successful runs print the run summary."""

    def test_wsclock(self, trace_file, capsys) -> None:
        """WSClock prints its parameters, write-backs and the fault total."""
        assert main(["wsclock", "-n", "3", "-t", "3", trace_file]) == 0
        out = capsys.readouterr().out.splitlines()
        assert out[0] == "Total Frames: 3"
        assert out[1] == "Tau: 3"
        assert out[2] == "Memory accesses: R:1 W:2 R:3 W:2 W:4 R:4 R:4 R:5"
        assert "Write-back scheduled: Page 2 from Frame 1 (t=7)" in out
        assert out[-1] == "Total faults: 5"

    def test_optimal(self, trace_file, capsys) -> None:
        """Optimal needs no tau and does not print one."""
        assert main(["optimal", "-n", "3", trace_file]) == 0
        out = capsys.readouterr().out
        assert "Tau" not in out
        assert out.rstrip().endswith("Total faults: 5")

    def test_verbose_prints_event_log(self, trace_file, capsys) -> None:
        """-v prints every event."""
        assert main(["second", "-n", "3", "-v", trace_file]) == 0
        out = capsys.readouterr().out
        assert "Hit: Page 2 in Frame 1" in out
        assert "Evicting: Page 1 from Frame 0" in out

    def test_compare(self, trace_file, capsys) -> None:
        """compare prints one line per algorithm."""
        assert main(["compare", "-n", "3", trace_file]) == 0
        out = capsys.readouterr().out
        for name in ("Optimal", "Second-Chance", "WSClock"):
            assert name in out


class TestErrors:
    """Verify bad arguments and traces stop the run with status 1."""

    def test_missing_tau(self, trace_file, capsys) -> None:
        """WSClock requires tau."""
        assert main(["wsclock", "-n", "3", trace_file]) == 1
        assert capsys.readouterr().err.strip() == "Args Error: No tau provided"

    def test_missing_frames(self, trace_file, capsys) -> None:
        """The frame count is required."""
        assert main(["optimal", trace_file]) == 1
        assert capsys.readouterr().err.strip() == "Args Error: No frame count provided"

    def test_invalid_frames(self, trace_file, capsys) -> None:
        """A non-numeric frame count is rejected."""
        assert main(["optimal", "-n", "many", trace_file]) == 1
        assert capsys.readouterr().err.strip() == "Args Error: Invalid frame count provided"

    def test_zero_frames(self, trace_file, capsys) -> None:
        """Zero frames is rejected before reading the trace."""
        assert main(["second", "-n", "0", trace_file]) == 1
        assert "Args Error" in capsys.readouterr().err

    def test_bad_token(self, tmp_path, capsys) -> None:
        """A malformed token is reported and nothing is simulated."""
        path = tmp_path / "bad.txt"
        path.write_text("R:1 X:2")
        assert main(["optimal", "-n", "2", str(path)]) == 1
        captured = capsys.readouterr()
        assert captured.err.strip() == "Trace Error: Invalid access token: X"
        assert captured.out == ""

    def test_missing_file(self, tmp_path, capsys) -> None:
        """An unreadable trace file is reported."""
        path = tmp_path / "missing.txt"
        assert main(["optimal", "-n", "2", str(path)]) == 1
        assert "not found" in capsys.readouterr().err
