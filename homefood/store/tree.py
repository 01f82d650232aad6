"""Path helpers over a JSON tree made of dicts, lists and scalars.

Every function here works on a plain ``dict`` holding the top-level keys, so
the same code serves the in-memory store (whole tree) and the SQL store (one
top-level document at a time).
"""
import json
import uuid
from typing import Any

from homefood.errors import ValidationError

_FORBIDDEN = set(".#$[]")


def split_path(path: str) -> list[str]:
    path = (path or "").strip("/")
    if not path:
        return []
    parts = path.split("/")
    for p in parts:
        if not p or _FORBIDDEN & set(p):
            raise ValidationError(f"invalid path segment {p!r} in {path!r}")
    return parts


def new_key() -> str:
    return str(uuid.uuid4())


def normalize(value: Any) -> Any:
    """Round-trip through JSON so stored values never alias caller objects."""
    if value is None:
        return None
    try:
        value = json.loads(json.dumps(value))
    except (TypeError, ValueError) as exc:
        raise ValidationError(f"value is not JSON serializable: {exc}") from exc
    if value == {} or value == []:
        return None
    return value


def _child(node: Any, key: str) -> Any:
    if isinstance(node, dict):
        return node.get(key)
    if isinstance(node, list) and key.isdigit() and int(key) < len(node):
        return node[int(key)]
    return None


def _assign(node: Any, key: str, value: Any) -> None:
    if isinstance(node, dict):
        node[key] = value
        return
    if isinstance(node, list) and key.isdigit():
        idx = int(key)
        if idx < len(node):
            node[idx] = value
            return
        if idx == len(node):
            node.append(value)
            return
    raise ValidationError(f"cannot write key {key!r} into a list")


def tree_get(tree: dict, parts: list[str]) -> Any:
    node: Any = tree
    for p in parts:
        node = _child(node, p)
        if node is None:
            return None
    return node


def tree_set(tree: dict, parts: list[str], value: Any) -> None:
    if value is None:
        tree_remove(tree, parts)
        return
    node: Any = tree
    for p in parts[:-1]:
        child = _child(node, p)
        if not isinstance(child, (dict, list)):
            child = {}
            _assign(node, p, child)
        node = child
    _assign(node, parts[-1], value)


def tree_remove(tree: dict, parts: list[str]) -> None:
    trail = [tree]
    node: Any = tree
    for p in parts[:-1]:
        node = _child(node, p)
        if not isinstance(node, (dict, list)):
            return
        trail.append(node)

    last = parts[-1]
    if isinstance(node, dict):
        node.pop(last, None)
    elif isinstance(node, list) and last.isdigit() and int(last) < len(node):
        del node[int(last)]

    # prune containers left empty, bottom-up
    for depth in range(len(parts) - 1, 0, -1):
        container = trail[depth]
        if container:
            break
        parent = trail[depth - 1]
        key = parts[depth - 1]
        if isinstance(parent, dict):
            parent.pop(key, None)
        elif isinstance(parent, list):
            del parent[int(key)]
