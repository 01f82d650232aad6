import copy
from typing import Any, Callable

from homefood.store.base import DocumentStore
from homefood.store.tree import normalize, tree_get


class MemoryDocumentStore(DocumentStore):
    """Process-local store; used by tests and as a scratch backend."""

    def __init__(self, initial: dict | None = None):
        super().__init__()
        self._tree: dict = normalize(initial) or {}

    def _read(self, parts: list[str]) -> Any:
        if not parts:
            return self._tree
        return tree_get(self._tree, parts)

    def _mutate(self, root: str, fn: Callable[[dict], None]) -> None:
        work = {root: copy.deepcopy(self._tree.get(root))} if root in self._tree else {}
        fn(work)
        if work.get(root) in (None, {}, []):
            self._tree.pop(root, None)
        else:
            self._tree[root] = work[root]
