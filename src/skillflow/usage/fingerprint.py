"""Client fingerprint: a locally persisted pseudo-identifier, not a credential."""
import hashlib
import os
import platform
import time

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"


def to_base36(value: int) -> str:
    """Render a non-negative integer in base 36."""
    if value == 0:
        return "0"
    out = []
    while value:
        value, rem = divmod(value, 36)
        out.append(_DIGITS[rem])
    return "".join(reversed(out))


def generate_fingerprint() -> str:
    """
    Generate a new fingerprint from host traits and the current time.

    Format: ``fp-<hash>-<millis>`` with both parts in base 36.
    """
    raw = "|".join(
        [
            platform.node(),
            platform.system(),
            platform.machine(),
            platform.python_version(),
            str(time.timezone),
            str(os.cpu_count() or 0),
        ]
    )
    digest = int.from_bytes(hashlib.sha256(raw.encode("utf-8")).digest()[:4], "big")
    return f"fp-{to_base36(digest)}-{to_base36(int(time.time() * 1000))}"
