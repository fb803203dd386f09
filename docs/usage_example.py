"""
logjack usage example.

Run: pip install -e . && python docs/usage_example.py

Usage:
    from logjack import callstack, new_entry
    entry = new_entry()
    entry.add_field("wallet", addr)
    entry.info("wallet analyzed")
"""

from __future__ import annotations

from logjack import callstack, new_entry, with_stack


def load_profile(wallet: str) -> dict:
    raise EOFError("profile stream ended early")


def main() -> None:
    entry = new_entry()
    entry.add_fields({"wallet": "9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka", "attempt": 1})
    entry.info("wallet analysis started")

    try:
        load_profile("9QCfNuQuxct1Xk9ytFYgxc5fThmTzL4pHQnSjjrVUrka")
    except EOFError as exc:
        entry = callstack(exc)
        entry.add_field("attempt", 2)
        entry.warnf("retrying after %s", type(exc).__name__)

    entry = new_entry()
    entry.add_error(with_stack(TimeoutError("rpc timed out")))
    print("rendered:", entry)


if __name__ == "__main__":
    main()
