"""``python -m shuttle``."""

from __future__ import annotations

from shuttle.cli.main import run


def main() -> None:
    run()


if __name__ == "__main__":
    main()
