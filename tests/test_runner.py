"""Tests for the demo runner."""
import logging

import run_fulfillment


def test_runner_without_robot(monkeypatch, capsys):
    logging.info("\n=== TEST: runner without robot ===")
    monkeypatch.setattr("sys.argv", ["run_fulfillment.py", "--no-robot", "--order", "hydraulic pump", "2"])

    run_fulfillment.main()

    out = capsys.readouterr().out
    assert "committed: ['hydraulic pump x 2']" in out
    assert "revenue: 17000" in out


def test_runner_sends_program_to_configured_ports(monkeypatch, capsys, robot_ports):
    """CLI ports override the settings the robot link is built from."""
    control, prog = robot_ports
    monkeypatch.setenv("FULFILLMENT_ROBOT_HOST", "127.0.0.1")
    monkeypatch.setattr("sys.argv", [
        "run_fulfillment.py",
        "--control-port", str(control.port),
        "--program-port", str(prog.port),
        "--order", "servo motor", "1",
    ])

    run_fulfillment.main()

    assert control.wait_for(1) == [b"brake release\n"]
    program = prog.wait_for(1)[0]
    assert program.startswith(b"def f():")
    assert program.endswith(b"\n")
    assert "revenue: 4300" in capsys.readouterr().out
