import threading
from typing import Dict, Iterable, Optional


class SymbolTable:
    """
    Variable name -> value accumulated across analyses (sent as dict_of_vars).
    Grows only from assignment-flagged response items.
    """

    def __init__(self, initial: Optional[Dict[str, str]] = None):
        self._vars: Dict[str, str] = dict(initial or {})
        self._lock = threading.Lock()

    def snapshot(self) -> Dict[str, str]:
        with self._lock:
            return dict(self._vars)

    def assign(self, name: str, value: str) -> None:
        with self._lock:
            self._vars[name] = value

    def apply_assignments(self, items: Iterable) -> int:
        """Binds expr -> result for every item with assign set, in order. Returns the count."""
        applied = 0
        with self._lock:
            for item in items:
                if item.assign:
                    self._vars[item.expr] = item.result
                    applied += 1
        return applied

    def clear(self) -> None:
        with self._lock:
            self._vars.clear()

    def __len__(self) -> int:
        return len(self._vars)

    def __contains__(self, name: str) -> bool:
        return name in self._vars
