# glass_nesting/test_logger.py
#   pytest glass_nesting/test_logger.py

from __future__ import annotations

from glass_nesting.logger import Logger


def test_fields_and_streams(capsys) -> None:
    log = Logger(prefix="[T]")
    log.info("placed", pieces=3, utilization=81.25)
    log.warn("short", unplaced=1)

    out, err = capsys.readouterr()
    assert out == "[T] placed pieces=3 utilization=81.25\n"
    assert err == "[T] WARNING: short unplaced=1\n"


def test_debug_needs_verbose(capsys) -> None:
    log = Logger()
    log.debug("hidden")
    log.verbose = True
    log.debug("shown", generation=10)
    assert capsys.readouterr().out == "[NEST] shown generation=10\n"


def test_child_binds_context_and_follows_root(capsys) -> None:
    root = Logger(prefix="[T]")
    run = root.child(run="abc")
    run.info("start", algorithm="blf")
    assert capsys.readouterr().out == "[T] start run=abc algorithm=blf\n"

    root.enabled = False
    run.info("muted")
    run.error("still printed")
    out, err = capsys.readouterr()
    assert out == ""
    assert err == "[T] ERROR: still printed run=abc\n"
