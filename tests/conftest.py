"""Shared stack dump samples."""
import pytest

from stack_analyzer.config import ENV_LOG_LEVEL, ENV_MAX_ANCESTOR_DEPTH


PANIC_DUMP = (
    "panic: runtime error: invalid memory address or nil pointer dereference\n"
    "[signal SIGSEGV: segmentation violation code=0x1 addr=0x0 pc=0x47e2b5]\n"
    "\n"
    "goroutine 1 [running]:\n"
    "main.foo(0x0)\n"
    "\t/a/b.go:10 +0x1\n"
    "main.main()\n"
    "\t/a/main.go:5 +0x20\n"
    "\n"
    "goroutine 18 [chan receive, 5 minutes, locked to thread]:\n"
    "main.(*Worker).run(0xc000010000, 0x1)\n"
    "\t/home/user/app/worker.go:42 +0x1d\n"
    "created by main.main in goroutine 1\n"
    "\t/home/user/app/main.go:17 +0x85\n"
    "\n"
    "goroutine 7 [select (no cases)]:\n"
    "main.idle(...)\n"
    "\t/home/user/app/idle.go:8\n"
    "created by main.main\n"
    "\t/home/user/app/main.go:20 +0x9a\n"
    "\n"
    "exit status 2\n"
)

ANCESTOR_DUMP = (
    "goroutine 7 [running]:\n"
    "main.child()\n"
    "\t/app/main.go:30 +0x10\n"
    "created by main.parent in goroutine 6\n"
    "\t/app/main.go:25 +0x20\n"
    "[originating from goroutine 6]:\n"
    "main.parent(...)\n"
    "\t/app/main.go:25 +0x20\n"
    "created by main.main\n"
    "\t/app/main.go:12 +0x30\n"
)


@pytest.fixture
def panic_dump():
    return PANIC_DUMP


@pytest.fixture
def ancestor_dump():
    return ANCESTOR_DUMP


@pytest.fixture
def clean_env(monkeypatch):
    """Remove settings variables for the duration of a test."""
    for name in (ENV_MAX_ANCESTOR_DEPTH, ENV_LOG_LEVEL):
        # set first so the original (absent) value is restored afterwards
        monkeypatch.setenv(name, "unset")
        monkeypatch.delenv(name)
    return monkeypatch
