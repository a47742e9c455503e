"""Tests for the single-line tokenizers."""
from stack_analyzer.models import Frame
from stack_analyzer.tokenizers import (
    parse_ancestor_id,
    parse_file_line,
    parse_func,
    parse_goroutine_header,
)


def test_header_running():
    """Test a plain header yields an empty goroutine shell."""
    g = parse_goroutine_header("1 [running]:")
    assert g is not None
    assert g.id == 1
    assert g.status == "running"
    assert g.wait_millis == 0
    assert g.locked_to_thread is False
    assert g.stack == []
    assert g.frames_elided is False
    assert g.created_by == Frame()
    assert g.ancestor is None


def test_header_minutes_and_locked():
    """Test the wait and locked-to-thread annotations."""
    g = parse_goroutine_header("2 [chan receive, 5 minutes, locked to thread]:")
    assert g.id == 2
    assert g.status == "chan receive"
    assert g.wait_millis == 300000
    assert g.wait_minutes == 5
    assert g.locked_to_thread is True


def test_header_locked_without_minutes():
    g = parse_goroutine_header("3 [syscall, locked to thread]:")
    assert g.status == "syscall"
    assert g.wait_millis == 0
    assert g.locked_to_thread is True


def test_header_status_with_parentheses():
    g = parse_goroutine_header("7 [select (no cases)]:")
    assert g.status == "select (no cases)"


def test_header_rejects_malformed():
    """Test malformed headers report no match instead of raising."""
    assert parse_goroutine_header("x [running]:") is None
    assert parse_goroutine_header("1 [running]") is None
    assert parse_goroutine_header("1 (running):") is None
    assert parse_goroutine_header("1 [running]: trailing") is None
    assert parse_goroutine_header("1 []:") is None
    assert parse_goroutine_header("1 [chan send, many minutes]:") is None
    assert parse_goroutine_header("") is None


def test_func_simple_call():
    assert parse_func("main.foo(0x0)") == Frame(function="main.foo")
    assert parse_func("main.main()") == Frame(function="main.main")
    assert parse_func("main.idle(...)") == Frame(function="main.idle")


def test_func_method_receiver():
    """Test a pointer receiver group followed by the argument list."""
    frame = parse_func("sync.(*WaitGroup).Wait(0xc00001c0b0?)")
    assert frame.function == "sync.(*WaitGroup).Wait"
    assert frame.file == ""
    assert frame.line == 0


def test_func_rejects_bad_parentheses():
    """Test unbalanced, nested, missing and leading parentheses."""
    assert parse_func("main.foo") is None
    assert parse_func("main.foo(0x1") is None
    assert parse_func("main.foo)(") is None
    assert parse_func("main.foo((0x1))") is None
    assert parse_func("main.foo(0x1)(") is None
    assert parse_func("(0x1)") is None
    assert parse_func("") is None


def test_func_creator_mode():
    """Test creator lines keep only the text before the first space."""
    assert parse_func("main.main in goroutine 1", creator=True) == Frame(function="main.main")
    assert parse_func("main.main", creator=True) == Frame(function="main.main")
    assert parse_func("net/http.(*Server).Serve", creator=True).function == "net/http.(*Server).Serve"
    assert parse_func("", creator=True) is None


def test_file_line_with_offset():
    assert parse_file_line("\t/a/b.go:10 +0x1") == ("/a/b.go", 10)


def test_file_line_without_offset():
    assert parse_file_line("\t/home/user/app/idle.go:8") == ("/home/user/app/idle.go", 8)
    assert parse_file_line("\t/a.go:0") == ("/a.go", 0)


def test_file_line_windows_drive_letter():
    """Test a colon not followed by a digit stays part of the path."""
    assert parse_file_line("\tC:/go/src/runtime/proc.go:250 +0x1d") == (
        "C:/go/src/runtime/proc.go", 250)


def test_file_line_multi_digit_number():
    assert parse_file_line("\t/x/y.go:12345 +0xfff") == ("/x/y.go", 12345)


def test_file_line_rejects_malformed():
    """Test missing tab, extra tab, missing number and broken digit runs."""
    assert parse_file_line("/a/b.go:10 +0x1") is None
    assert parse_file_line("\t\t/a/b.go:10") is None
    assert parse_file_line("\t/a/b.go") is None
    assert parse_file_line("\t/a/b.go:") is None
    assert parse_file_line("\t/a/b.go:12x") is None
    assert parse_file_line("\t/a:1b/x.go:3") is None
    assert parse_file_line("\t") is None
    assert parse_file_line("") is None


def test_ancestor_id():
    assert parse_ancestor_id("[originating from goroutine 6]:") == 6
    assert parse_ancestor_id("[originating from goroutine 123456]:") == 123456


def test_ancestor_id_rejects_malformed():
    assert parse_ancestor_id("[originating from goroutine abc]:") is None
    assert parse_ancestor_id("[originating from goroutine 6]") is None
    assert parse_ancestor_id("[originating from goroutine ]:") is None


def test_func_creator_mode_leading_space():
    """Test a creator name preceded by a space is kept whole."""
    assert parse_func(" main.main", creator=True) == Frame(function=" main.main")
