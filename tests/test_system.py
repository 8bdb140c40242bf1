from chrislang.system import (
    append_file,
    command_output,
    file_exists,
    read_file,
    run_command,
    write_file,
)


def test_run_command_exit_status():
    assert run_command("exit 0") == 0
    assert run_command("exit 3") == 3


def test_run_command_none():
    assert run_command(None) == -1


def test_command_output_captures_stdout():
    assert command_output("echo hello") == "hello\n"


def test_command_output_none():
    assert command_output(None) == ""


def test_write_then_read_round_trip(tmp_path):
    target = tmp_path / "out.txt"
    content = "line one\nline two\n"
    assert write_file(target, content) is True
    assert read_file(target) == content


def test_write_replaces_contents(tmp_path):
    target = tmp_path / "out.txt"
    write_file(target, "first")
    write_file(target, "second")
    assert read_file(target) == "second"


def test_append_file(tmp_path):
    target = tmp_path / "log.txt"
    assert append_file(target, "a") is True
    assert append_file(target, "b") is True
    assert read_file(target) == "ab"


def test_read_missing_file_is_empty(tmp_path):
    assert read_file(tmp_path / "missing.txt") == ""
    assert read_file(None) == ""


def test_write_into_missing_directory_fails(tmp_path):
    assert write_file(tmp_path / "no" / "such" / "file.txt", "x") is False
    assert write_file(None, "x") is False
    assert write_file(tmp_path / "f.txt", None) is False


def test_file_exists(tmp_path):
    target = tmp_path / "here.txt"
    assert file_exists(target) is False
    write_file(target, "")
    assert file_exists(target) is True
    assert file_exists(None) is False