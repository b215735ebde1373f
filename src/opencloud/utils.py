import random
import time
from typing import Any


class _Unset:
    def __repr__(self) -> str:
        return "UNSET"


# Marks a field as "not part of this update"; None means "clear this field".
UNSET: Any = _Unset()


def build_field_mask(body: Any) -> str:
    """Flatten a partial update body into a comma-separated list of dotted paths.

    Nested dicts recurse; None, lists and scalars are leaves; an empty nested dict
    is a leaf too. Keys whose value is UNSET are skipped.
    """
    paths: list[str] = []

    def visit(value: Any, parent: str | None) -> None:
        if not isinstance(value, dict):
            return
        for key, val in value.items():
            if val is UNSET:
                continue
            path = f"{parent}.{key}" if parent else str(key)
            if isinstance(val, dict):
                before = len(paths)
                visit(val, path)
                if len(paths) == before:
                    paths.append(path)
                continue
            paths.append(path)

    visit(body, None)
    return ",".join(paths)


def drop_unset(body: Any) -> Any:
    """Return a copy of `body` with every UNSET value removed, at any depth."""
    if isinstance(body, dict):
        return {k: drop_unset(v) for k, v in body.items() if v is not UNSET}
    return body


def generate_idempotency_key() -> str:
    """Return `<epoch ms>-xxxx-xxxx-xxxx-xxxx` with four random hex segments."""
    timestamp = int(time.time() * 1000)
    segments = [f"{random.randrange(0x10000):04x}" for _ in range(4)]
    return f"{timestamp}-{'-'.join(segments)}"
