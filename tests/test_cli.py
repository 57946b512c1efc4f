# tests/test_cli.py
import json
import sys
import pytest

from treedump_lib import __version__
from treedump_lib.treedump_cli import config_from_args, main, parse_args
from treedump_lib.treedump_config import DEFAULT_MODEL, IGNORE_FILE_NAME
from treedump_lib.treedump_fs import OSFileSystem
from treedump_lib.treedump_styling import Colors


def run_parse_args(argv: list):
    """Helper to run parse_args with specific argv."""
    original_argv = sys.argv
    try:
        sys.argv = ["treedump"] + argv
        return parse_args()
    finally:
        sys.argv = original_argv


def run_main(argv: list, monkeypatch):
    monkeypatch.setattr(sys, "argv", ["treedump"] + argv)
    main()


# === parse_args ===

def test_cli_no_args():
    args = run_parse_args([])
    assert args.directory is None
    assert args.extensions == []


def test_cli_defaults(tmp_path):
    args = run_parse_args([str(tmp_path)])
    assert args.directory == str(tmp_path)
    assert args.recursive is True
    assert args.exclude_tests is False
    assert args.hidden is False
    assert args.use_default_excludes is True
    assert args.ignore_file == IGNORE_FILE_NAME
    assert args.count_tokens is False
    assert args.model == DEFAULT_MODEL
    assert args.style == "unicode"
    assert args.verbose is False


def test_cli_extensions_are_positional(tmp_path):
    args = run_parse_args([str(tmp_path), ".go", ".js"])
    assert args.directory == str(tmp_path)
    assert args.extensions == [".go", ".js"]


def test_cli_filtering_args(tmp_path):
    args = run_parse_args([
        "-e", "vendor", "--exclude", "*.log",
        "-t", "-H", "-n",
        "--no-default-excludes",
        "--ignore-file", ".myignore",
        str(tmp_path), ".go",
    ])
    assert args.exclude == ["vendor", "*.log"]
    assert args.exclude_tests is True
    assert args.hidden is True
    assert args.recursive is False
    assert args.use_default_excludes is False
    assert args.ignore_file == ".myignore"
    assert args.extensions == [".go"]


def test_cli_output_args(tmp_path):
    args = run_parse_args([str(tmp_path), "-c", "-m", "o200k_base", "-s", "ascii", "--no-color", "-v"])
    assert args.count_tokens is True
    assert args.model == "o200k_base"
    assert args.style == "ascii"
    assert args.colorize is False
    assert args.verbose is True


def test_cli_color_flags_are_exclusive(tmp_path):
    with pytest.raises(SystemExit):
        run_parse_args([str(tmp_path), "--color", "--no-color"])


def test_cli_rejects_unknown_style(tmp_path):
    with pytest.raises(SystemExit):
        run_parse_args([str(tmp_path), "-s", "emoji"])


def test_cli_version(capsys):
    with pytest.raises(SystemExit) as excinfo:
        run_parse_args(["--version"])
    assert excinfo.value.code == 0
    assert __version__ in capsys.readouterr().out


def test_saved_config_seeds_defaults(tmp_path, isolated_user_config):
    isolated_user_config.parent.mkdir(parents=True)
    isolated_user_config.write_text(json.dumps({
        "exclude_patterns": ["dist/"], "show_hidden": True, "model": "o200k_base", "style": "ascii"
    }))
    args = run_parse_args([str(tmp_path), "-e", "build"])
    assert args.exclude == ["dist/", "build"]
    assert args.hidden is True
    assert args.model == "o200k_base"
    assert args.style == "ascii"

    overridden = run_parse_args([str(tmp_path), "-m", "cl100k_base"])
    assert overridden.model == "cl100k_base"


def test_config_from_args(tmp_path):
    args = run_parse_args([str(tmp_path), ".py", "-e", "x", "-t", "--ignore-file", ""])
    config = config_from_args(args)
    assert config.root_dir == str(tmp_path)
    assert config.file_types == (".py",)
    assert config.exclude_patterns == ("x",)
    assert config.exclude_tests is True
    assert config.ignore_file_name is None


# === main ===

def test_main_without_directory_exits_1(monkeypatch, capsys):
    with pytest.raises(SystemExit) as excinfo:
        run_main([], monkeypatch)
    assert excinfo.value.code == 1
    err = capsys.readouterr().err
    assert "usage:" in err
    assert "Error: No directory specified." in err


def test_main_missing_directory_exits_1(tmp_path, monkeypatch, capsys):
    with pytest.raises(SystemExit) as excinfo:
        run_main([str(tmp_path / "nope")], monkeypatch)
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "Starting directory not found" in captured.err
    assert captured.out == ""


def test_main_file_instead_of_directory_exits_1(tmp_path, monkeypatch, capsys):
    target = tmp_path / "file.txt"
    target.write_text("x")
    with pytest.raises(SystemExit) as excinfo:
        run_main([str(target)], monkeypatch)
    assert excinfo.value.code == 1
    assert "not a directory" in capsys.readouterr().err


def test_main_unreadable_ignore_file_exits_1(tmp_path, monkeypatch, capsys):
    # A directory where the ignore file should be cannot be read as a file
    (tmp_path / ".llmignore").mkdir()
    with pytest.raises(SystemExit) as excinfo:
        run_main([str(tmp_path)], monkeypatch)
    assert excinfo.value.code == 1
    assert "exclusion file" in capsys.readouterr().err


def test_main_writes_document_to_stdout(base_test_structure, monkeypatch, capsys):
    run_main([str(base_test_structure), ".go", "-t", "-e", "vendor"], monkeypatch)
    captured = capsys.readouterr()
    assert captured.out.startswith("Directory Structure:\n")
    assert "Content of main.go:" in captured.out
    assert "main_test.go" not in captured.out
    assert "lib.go" not in captured.out
    assert "[ERROR" not in captured.err


def test_main_per_file_errors_keep_exit_code_zero(base_test_structure, monkeypatch, capsys):
    # Binary files are skipped with a warning, not an error exit
    run_main([str(base_test_structure)], monkeypatch)
    captured = capsys.readouterr()
    assert "Skipping forbidden" in captured.err
    assert "(Binary - skipped content)" in captured.out


def test_main_count_tokens_reports_total(base_test_structure, monkeypatch, capsys):
    class FakeCounter:
        def __init__(self, model):
            self.model = model

        def count(self, text):
            return 1

    monkeypatch.setattr("treedump_lib.treedump_core.TokenCounter", FakeCounter)
    run_main([str(base_test_structure), ".go", "-c"], monkeypatch)
    captured = capsys.readouterr()
    # tree + main.go + src/utils.go + src/utils_test.go + vendor/lib.go + main_test.go
    assert "Total tokens: 6" in captured.err
    assert "Total tokens" not in captured.out


def test_saved_string_patterns_are_not_split_into_characters(tmp_path, isolated_user_config, capsys):
    isolated_user_config.parent.mkdir(parents=True)
    isolated_user_config.write_text(json.dumps({"exclude_patterns": "dist/"}))
    args = run_parse_args([str(tmp_path), "-e", "build"])
    assert args.exclude == ["build"]
    assert config_from_args(args).exclude_patterns == ("build",)
    assert "exclude_patterns" in capsys.readouterr().err


def test_main_survives_non_list_saved_patterns(base_test_structure, isolated_user_config, monkeypatch, capsys):
    isolated_user_config.parent.mkdir(parents=True)
    isolated_user_config.write_text(json.dumps({"exclude_patterns": 5}))
    run_main([str(base_test_structure), ".go"], monkeypatch)
    captured = capsys.readouterr()
    assert "Content of main.go:" in captured.out
    assert "[WARNING]" in captured.err
    assert "Traceback" not in captured.err


def test_main_traversal_error_exits_1(base_test_structure, monkeypatch, capsys):
    unlistable = str(base_test_structure / "src")
    real_list_dir = OSFileSystem.list_dir

    def list_dir(self, path):
        if path == unlistable:
            raise PermissionError(13, "Permission denied", path)
        return real_list_dir(self, path)

    monkeypatch.setattr(OSFileSystem, "list_dir", list_dir)
    with pytest.raises(SystemExit) as excinfo:
        run_main([str(base_test_structure)], monkeypatch)
    assert excinfo.value.code == 1
    captured = capsys.readouterr()
    assert "Scan failed:" in captured.err
    assert unlistable in captured.err
    assert captured.out == ""


def test_color_flag_forces_color_for_cli_and_scan(base_test_structure, monkeypatch, capsys):
    with pytest.raises(SystemExit):
        run_main(["--color"], monkeypatch)
    assert f"{Colors.RED}Error: No directory specified.{Colors.RESET}" in capsys.readouterr().err

    run_main([str(base_test_structure), "--color"], monkeypatch)
    err = capsys.readouterr().err
    assert Colors.YELLOW in err


def test_no_color_flag_keeps_diagnostics_plain(base_test_structure, monkeypatch, capsys):
    with pytest.raises(SystemExit):
        run_main([str(base_test_structure / "missing"), "--no-color"], monkeypatch)
    assert "\033[" not in capsys.readouterr().err
    run_main([str(base_test_structure), "--no-color"], monkeypatch)
    assert "\033[" not in capsys.readouterr().err
