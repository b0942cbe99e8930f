# review_gate/actions.py
"""
GitHub Actions runner primitives: workflow-command logging and step outputs.
Messages are escaped the same way @actions/core escapes command data.
"""
import os


def _escape(msg: str) -> str:
    return str(msg).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def debug(msg: str):
    print(f"::debug::{_escape(msg)}")


def info(msg: str):
    print(msg)


def warning(msg: str):
    print(f"::warning::{_escape(msg)}")


def error(msg: str):
    print(f"::error::{_escape(msg)}")


def set_failed(msg: str) -> int:
    """Report a failing step. Returns the exit code the caller should use."""
    error(msg)
    return 1


def set_output(name: str, value: str):
    """
    Append `name=value` to $GITHUB_OUTPUT. Outside of Actions the pair is
    echoed instead.
    """
    path = os.environ.get("GITHUB_OUTPUT")
    if not path:
        print(f"{name}={value}")
        return
    try:
        with open(path, "a", encoding="utf-8") as f:
            f.write(f"{name}={value}\n")
    except OSError as e:
        warning(f"Could not write output {name}: {e}")
