import os
import sys
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

from levelwise.cli import main

DATA = "a,b\na,b,c,-1\n\na\n b , c \n"


def write_data(tmp_path):
    path = tmp_path / "data.txt"
    path.write_text(DATA)
    return str(path)


def test_single_run_prints_and_logs(tmp_path, capsys):
    path = write_data(tmp_path)
    assert main([path, "2", "--log-dir", str(tmp_path)]) == 0
    out = capsys.readouterr().out
    assert "Total frequent itemsets: 5" in out
    assert "{ a, b } : 2" in out
    assert "{ b, c } : 2" in out
    lines = (tmp_path / "sequential_results.txt").read_text().splitlines()
    assert lines[0] == "Sequential"
    assert lines[1].isdigit()


def test_run_log_is_append_only(tmp_path):
    path = write_data(tmp_path)
    for _ in range(2):
        assert main([path, "2", "--strategy", "threads", "--workers", "2", "--quiet",
                     "--log-dir", str(tmp_path)]) == 0
    lines = (tmp_path / "parallel_results.txt").read_text().splitlines()
    assert lines[0::2] == ["Parallel_2_threads", "Parallel_2_threads"]


def test_output_file(tmp_path):
    path = write_data(tmp_path)
    out = tmp_path / "patterns.txt"
    assert main([path, "3", "--quiet", "--output", str(out), "--log-dir", str(tmp_path)]) == 0
    assert out.read_text() == "a:3\nb:3\n"


def test_sweep_logs_one_line_per_worker_count(tmp_path, capsys):
    path = write_data(tmp_path)
    assert main([path, "2", "--strategy", "threads", "--sweep", "--sweep-workers", "1", "2",
                 "--log-dir", str(tmp_path)]) == 0
    lines = (tmp_path / "parallel_performance.txt").read_text().splitlines()
    expected_counts = [n for n in (1, 2) if n <= (os.cpu_count() or 1)]
    assert len(lines) == len(expected_counts)
    for line, workers in zip(lines, expected_counts):
        assert line.startswith(f"Workers: {workers}, Time: ")
        assert line.endswith(" ms, Itemsets: 5")
    assert "elapsed_ms" in capsys.readouterr().out


def test_non_positive_support_is_fatal(tmp_path, capsys):
    path = write_data(tmp_path)
    assert main([path, "0", "--log-dir", str(tmp_path)]) == 1
    assert "Minimum support must be positive" in capsys.readouterr().err
    assert not (tmp_path / "sequential_results.txt").exists()


def test_missing_file_is_fatal(tmp_path, capsys):
    assert main([str(tmp_path / "nope.txt"), "2", "--log-dir", str(tmp_path)]) == 1
    assert "Cannot open file" in capsys.readouterr().err
