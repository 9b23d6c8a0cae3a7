from __future__ import annotations
from typing import Any, Iterable, Optional


def join_nonempty(items: Optional[Iterable[Any]], sep: str = ", ") -> str:
    """
    Join the non-blank entries of a stored list field. Mongo documents may
    hold null, a bare string or a list here; all three are accepted.
    """
    if items is None:
        return ""
    if isinstance(items, str):
        items = [items]
    return sep.join(s for s in (str(i).strip() for i in items if i is not None) if s)
