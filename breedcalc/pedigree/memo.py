"""
Memoization scopes for the relatedness engine.

    none     -- nothing is remembered, every query recomputes from the graph.
    unit     -- caches belong to one computation unit and die with it.
    process  -- caches outlive computation units. Only for static pedigree
                data: an identifier reused with a different ancestry in a
                later unit gets the earlier unit's answer.
"""
import logging
import threading

logger = logging.getLogger(__name__)


class _NullTable:
    """A mapping-like table that never stores anything."""

    def get(self, key, default=None):
        return default

    def __contains__(self, key):
        return False

    def __setitem__(self, key, value):
        pass

    def __len__(self):
        return 0


class _LockedTable:
    """Dict wrapper shared between units; reads and writes hold one lock."""

    def __init__(self, lock):
        self._lock = lock
        self._data = {}

    def get(self, key, default=None):
        with self._lock:
            return self._data.get(key, default)

    def __contains__(self, key):
        with self._lock:
            return key in self._data

    def __setitem__(self, key, value):
        with self._lock:
            self._data[key] = value

    def __len__(self):
        with self._lock:
            return len(self._data)


class NoMemo:
    scope = 'none'

    def table(self, name):
        return _NullTable()


class UnitMemo:
    scope = 'unit'

    def __init__(self):
        self._tables = {}

    def table(self, name):
        return self._tables.setdefault(name, {})


class SharedMemo:
    scope = 'process'

    def __init__(self):
        self._lock = threading.RLock()
        self._tables = {}

    def table(self, name):
        with self._lock:
            if name not in self._tables:
                self._tables[name] = _LockedTable(self._lock)
            return self._tables[name]

    def clear(self):
        with self._lock:
            logger.info("Clearing %d process-wide memo tables.", len(self._tables))
            self._tables.clear()


SHARED_MEMO = SharedMemo()

MEMO_SCOPES = ('none', 'unit', 'process')


def make_memo(scope):
    """Returns the memo object for a scope name. 'process' is a singleton."""
    if scope == 'none':
        return NoMemo()
    if scope == 'unit':
        return UnitMemo()
    if scope == 'process':
        return SHARED_MEMO
    raise ValueError(f"Unknown memo scope: {scope!r}. Expected one of {MEMO_SCOPES}.")
