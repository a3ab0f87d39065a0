import os

_FALSY = ("0", "false", "no", "off")


def _flag(name: str, default: bool) -> bool:
    raw = os.environ.get(name)
    if raw is None:
        return default
    return raw.strip().lower() not in _FALSY


# When on, chain/or_else only accept Future instances from user functions.
# Turn off to accept any object exposing fork(on_failure, on_success).
STRICT = _flag("FP_FUTURE_STRICT", True)
