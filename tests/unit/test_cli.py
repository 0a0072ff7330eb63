"""Tests for the tracesort command line."""

import json

import pytest

from tracesort import cli
from tracesort.cli import main
from tracesort.errors import InvalidInput
from tracesort.sandbox import INSTRUMENTED_TEMPLATE


class TestList:
    def test_lists_algorithms(self, capsys):
        assert main(["--list"]) == 0
        out = capsys.readouterr().out
        assert "bubble-sort" in out
        assert "quantum-bogo-sort" in out
        assert len(out.strip().split("\n")) == 19


class TestBuiltinAlgorithms:
    def test_text_output(self, capsys):
        assert main(["-a", "selection-sort", "-v", "3,1,2"]) == 0
        out = capsys.readouterr().out
        assert out.startswith("# Selection Sort")
        assert "Algorithm completed! All elements are sorted." in out

    def test_json_output(self, capsys):
        assert main(["-a", "merge-sort", "-v", "3, 1.5, 2", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["final_values"] == [1.5, 2, 3]
        assert data["algorithm"] == "Merge Sort"

    def test_random_input_with_seed(self, capsys):
        assert main(["-a", "quick-sort", "-r", "8", "--seed", "3", "--json"]) == 0
        first = json.loads(capsys.readouterr().out)
        assert main(["-a", "quick-sort", "-r", "8", "--seed", "3", "--json"]) == 0
        second = json.loads(capsys.readouterr().out)
        assert len(first["final_values"]) == 8
        assert first == second

    def test_default_values(self, capsys):
        assert main([]) == 0
        assert "# Bubble Sort" in capsys.readouterr().out

    def test_adapter_error_exits_nonzero(self, capsys):
        assert main(["-a", "radix-sort", "-v", "3,-1"]) == 1
        captured = capsys.readouterr()
        assert "error:" in captured.err
        assert "Starting Radix Sort" in captured.out

    def test_rejects_non_numeric_values(self, capsys):
        with pytest.raises(SystemExit):
            main(["-v", "1,x"])

    def test_rejects_nan_values(self, capsys):
        with pytest.raises(SystemExit):
            main(["-v", "1,nan"])

    def test_rejects_unknown_algorithm(self, capsys):
        with pytest.raises(SystemExit):
            main(["-a", "stooge-sort"])


class TestPrograms:
    def test_runs_program_file(self, tmp_path, capsys):
        program = tmp_path / "sort.py"
        program.write_text(INSTRUMENTED_TEMPLATE)
        assert main(["--program", str(program), "-v", "2,1", "--json"]) == 0
        data = json.loads(capsys.readouterr().out)
        assert data["final_values"] == [1, 2]

    def test_failing_program_exits_nonzero(self, tmp_path, capsys):
        program = tmp_path / "sort.py"
        program.write_text("def custom_sort(arr):\n    arr.compare(0, 1)\n    raise ValueError('boom')\n")
        assert main(["--program", str(program), "-v", "2,1"]) == 1
        captured = capsys.readouterr()
        assert "[runtime] ValueError: boom (line 3)" in captured.err
        assert "partial" in captured.out

    def test_uninstrumented_mode(self, tmp_path, capsys):
        program = tmp_path / "sort.py"
        program.write_text("def go(values):\n    return sorted(values)\n")
        argv = ["--program", str(program), "--mode", "uninstrumented", "--entry", "go",
                "-v", "3,1,2", "--json"]
        assert main(argv) == 0
        data = json.loads(capsys.readouterr().out)
        assert len(data["steps"]) == 2

    def test_rejects_nan_for_programs(self, tmp_path, capsys):
        program = tmp_path / "sort.py"
        program.write_text(INSTRUMENTED_TEMPLATE)
        with pytest.raises(SystemExit):
            main(["--program", str(program), "-v", "1,nan"])

    def test_input_error_exits_nonzero(self, tmp_path, capsys, monkeypatch):
        def reject(*args, **kwargs):
            raise InvalidInput("Values must be non-NaN numbers, got nan")

        monkeypatch.setattr(cli, "trace_user_program", reject)
        program = tmp_path / "sort.py"
        program.write_text(INSTRUMENTED_TEMPLATE)
        assert main(["--program", str(program), "-v", "2,1"]) == 1
        assert "error: Values must be non-NaN numbers" in capsys.readouterr().err
