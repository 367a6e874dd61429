from typing import Any, Dict, Iterable


def apply_updates(obj, data: Dict[str, Any], allowed: Iterable[str]) -> bool:
    """Copy the allowed keys of ``data`` onto ``obj``; report whether anything was set."""
    changed = False
    for field in allowed:
        if field in data:
            setattr(obj, field, data[field])
            changed = True
    return changed
