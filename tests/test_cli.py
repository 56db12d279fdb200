import pytest
from click.testing import CliRunner

from repodump import __version__
from repodump.main import cli
from repodump.render.contents import BANNER


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def repo(tmp_path, make_files):
    return make_files(tmp_path / "myrepo", {
        ".git/HEAD": "ref: refs/heads/main\n",
        ".gitignore": "*.log\n",
        "debug.log": "noise\n",
        "src/main.rs": "fn main() {}\n",
        "README.md": "# Hello\n",
    })


def test_cli_writes_output_and_summary(runner, repo, tmp_path):
    out = tmp_path / "dump.txt"
    result = runner.invoke(cli, [str(repo), "-o", str(out)])

    assert result.exit_code == 0, result.output
    text = out.read_text(encoding="utf-8")

    assert text.startswith("Directory Structure:\nmyrepo/\n")
    assert "debug.log" not in text
    assert ".git" not in text.replace(".gitignore", "")
    assert f"{BANNER}\nFILE: src/main.rs\n{BANNER}\nfn main() {{}}\n" in text

    assert "Repository: myrepo" in result.output
    assert "Files in structure: 3" in result.output
    assert "Files in contents: 3" in result.output
    assert f"Output size: {len(text.encode('utf-8'))} bytes" in result.output
    assert f"Estimated tokens: {len(text) // 4}" in result.output


def test_cli_quiet(runner, repo, tmp_path):
    out = tmp_path / "dump.txt"
    result = runner.invoke(cli, [str(repo), "-o", str(out), "-q"])

    assert result.exit_code == 0
    assert result.output == ""
    assert out.exists()


def test_cli_patterns(runner, repo, tmp_path):
    out = tmp_path / "dump.txt"
    result = runner.invoke(cli, [
        str(repo), "-o", str(out), "-q",
        "-f", "**/*.rs", "-f", "*.md",
        "-e", "README.md",
        "-i", "README.md",
        "-e", "src/**",
    ])

    assert result.exit_code == 0, result.output
    text = out.read_text(encoding="utf-8")
    assert "FILE: README.md" in text
    assert "FILE: src/main.rs" not in text
    # Unpruned tree still shows every file
    assert "main.rs" in text


def test_cli_prune_tree(runner, repo, tmp_path):
    out = tmp_path / "dump.txt"
    result = runner.invoke(cli, [str(repo), "-o", str(out), "-f", "*.md", "-p", "-t"])

    assert result.exit_code == 0, result.output
    assert out.read_text(encoding="utf-8") == "Directory Structure:\nmyrepo/\n└── README.md\n\n"
    assert "Files in structure: 1" in result.output
    assert "Files in contents: 0" in result.output


def test_cli_ignore_gitignore(runner, repo, tmp_path):
    out = tmp_path / "dump.txt"
    result = runner.invoke(cli, [str(repo), "-o", str(out), "-q", "-g", "-c"])

    assert result.exit_code == 0
    text = out.read_text(encoding="utf-8")
    assert "FILE: debug.log" in text
    assert "Directory Structure:" not in text


def test_cli_include_resurrects_vcs_metadata(runner, repo, tmp_path):
    out = tmp_path / "dump.txt"
    result = runner.invoke(cli, [str(repo), "-o", str(out), "-q", "-c", "-i", ".git/HEAD"])

    assert result.exit_code == 0
    assert "FILE: .git/HEAD" in out.read_text(encoding="utf-8")


def test_cli_both_section_flags_and_prompt(runner, repo, tmp_path):
    out = tmp_path / "dump.txt"
    result = runner.invoke(cli, [str(repo), "-o", str(out), "-q", "-t", "-c", "-m", "What does this do?"])

    assert result.exit_code == 0
    assert out.read_text(encoding="utf-8") == "\nPrompt: What does this do?\n"


def test_cli_invalid_pattern(runner, tmp_path):
    out = tmp_path / "dump.txt"
    # The pattern error wins even though the directory does not exist
    result = runner.invoke(cli, [str(tmp_path / "missing"), "-o", str(out), "-f", "[abc"])

    assert result.exit_code == 1
    assert "Invalid glob pattern: [abc" in result.output
    assert not out.exists()


def test_cli_missing_directory(runner, tmp_path):
    out = tmp_path / "dump.txt"
    result = runner.invoke(cli, [str(tmp_path / "missing"), "-o", str(out)])

    assert result.exit_code == 1
    assert "Directory does not exist" in result.output
    assert not out.exists()


def test_cli_unwritable_output(runner, repo, tmp_path):
    out = tmp_path / "no" / "such" / "dir.txt"
    result = runner.invoke(cli, [str(repo), "-o", str(out)])

    assert result.exit_code == 1
    assert "Failed to write output file" in result.output


def test_cli_discovers_repository(runner, repo, monkeypatch):
    monkeypatch.chdir(repo / "src")
    result = runner.invoke(cli, ["-q", "-o", "out.txt"])

    assert result.exit_code == 0, result.output
    assert (repo / "src" / "out.txt").read_text(encoding="utf-8").startswith("Directory Structure:\nmyrepo/\n")


def test_cli_verbose_reports_unreadable_files(runner, repo, tmp_path):
    (repo / "logo.png").write_bytes(b"\x89PNG\xff\x00")
    out = tmp_path / "dump.txt"
    result = runner.invoke(cli, [str(repo), "-o", str(out), "-q", "-v"])

    assert result.exit_code == 0
    assert "Unreadable, using placeholder: logo.png" in result.output
    assert "[Binary file or read error]" in out.read_text(encoding="utf-8")


def test_cli_version(runner):
    result = runner.invoke(cli, ["--version"])

    assert result.exit_code == 0
    assert f"repodump, version {__version__}" in result.output
