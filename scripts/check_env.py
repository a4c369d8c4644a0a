from pathlib import Path
import sys

from dotenv import dotenv_values

PROJECT_ROOT = Path(__file__).resolve().parents[1]


def missing_env_keys(example: Path, actual: Path) -> set[str]:
    """Keys declared in `example` that `actual` does not define (empty values count as defined)."""
    return set(dotenv_values(example)) - set(dotenv_values(actual))


def check_env_file(
    example: Path = PROJECT_ROOT / ".env.example",
    actual: Path = PROJECT_ROOT / ".env",
) -> None:
    """
    Checks if all required keys from .env.example are present in .env.
    """
    for path in (example, actual):
        if not path.exists():
            print(f"File not found: {path}")
            raise SystemExit(1)

    missing_keys = missing_env_keys(example, actual)
    if missing_keys:
        print(f"Missing keys in {actual.name}: {', '.join(sorted(missing_keys))}")
        raise SystemExit(1)
    print(f"All required keys are present in {actual.name}.")


if __name__ == "__main__":
    check_env_file(*(Path(arg) for arg in sys.argv[1:3]))
