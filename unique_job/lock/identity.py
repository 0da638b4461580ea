"""
Job signature encoding and lock key derivation.

Lock keys must match those produced by other implementations of the same
protocol byte for byte, so argument trees are rendered the way Ruby renders
an array of strings with ``Array#inspect``.
"""

from collections.abc import Mapping, Sequence
from typing import Any

from unique_job.constants import LOCK_NAME_PREFIX, RUN_LOCK_NAME_PREFIX

_ESCAPES = {
    '"': '\\"',
    "\\": "\\\\",
    "\n": "\\n",
    "\t": "\\t",
    "\r": "\\r",
    "\f": "\\f",
    "\v": "\\v",
    "\b": "\\b",
    "\a": "\\a",
    "\x1b": "\\e",
}


def _quote(text: str) -> str:
    """Render a string the way Ruby's String#inspect does."""
    out = ['"']
    for index, char in enumerate(text):
        if char in _ESCAPES:
            out.append(_ESCAPES[char])
        elif char == "#" and text[index + 1 : index + 2] in ("{", "$", "@"):
            out.append("\\#")
        elif ord(char) < 0x20 or ord(char) == 0x7F:
            out.append(f"\\u{ord(char):04X}")
        else:
            out.append(char)
    out.append('"')
    return "".join(out)


def _render_list(items: list[str]) -> str:
    return "[" + ", ".join(_quote(item) for item in items) + "]"


def _scalar_text(obj: Any) -> str:
    if obj is None:
        return ""
    if obj is True:
        return "true"
    if obj is False:
        return "false"
    return str(obj)


def _sorted_pairs(mapping: Mapping[Any, Any]) -> list[tuple[str, str]]:
    """
    Encode mapping entries ordered by key.

    Keys are compared directly, as Ruby's ``Hash#keys.sort`` does, so numeric
    keys sort numerically. Keys that cannot be compared with each other fall
    back to ordering by their encoded text.
    """
    try:
        items = sorted(mapping.items(), key=lambda item: item[0])
    except TypeError:
        return sorted(
            (encode_args(key), encode_args(value)) for key, value in mapping.items()
        )
    return [(encode_args(key), encode_args(value)) for key, value in items]


def encode_args(obj: Any) -> str:
    """
    Encode an argument tree into its canonical string.

    Mappings are flattened into alternating key/value entries with keys
    sorted, so key order never changes the result. Sequences are encoded
    positionally. Everything else uses its textual form.

    Args:
        obj: Scalar, sequence or mapping, arbitrarily nested.

    Returns:
        The canonical encoding.
    """
    if isinstance(obj, Mapping):
        flat: list[str] = []
        for key, value in _sorted_pairs(obj):
            flat.append(key)
            flat.append(value)
        return _render_list(flat)
    if isinstance(obj, Sequence) and not isinstance(obj, (str, bytes, bytearray)):
        return _render_list([encode_args(item) for item in obj])
    return _scalar_text(obj)


def lock_key(job_type_name: str, args: Sequence[Any]) -> str:
    """
    Get the admission lock key for a job signature.

    Example:
        >>> lock_key("Job", ["hello"])
        'lock:Job-["hello"]'
    """
    return f"{LOCK_NAME_PREFIX}:{job_type_name}-{encode_args(list(args))}"


def run_lock_key(admission_key: str) -> str:
    """Get the run lock key paired with an admission lock key."""
    return f"{RUN_LOCK_NAME_PREFIX}{admission_key}"


def lock_key_from_run_lock(run_key: str) -> str:
    """Get the admission lock key from a run lock key."""
    if run_key.startswith(RUN_LOCK_NAME_PREFIX):
        return run_key[len(RUN_LOCK_NAME_PREFIX):]
    return run_key
