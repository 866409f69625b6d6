from __future__ import annotations

from balena_cli.app import run


def main() -> None:
    run()


__all__ = ["main"]

if __name__ == "__main__":
    main()
