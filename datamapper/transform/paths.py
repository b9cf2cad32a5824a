"""
Nested record access using dot paths and array-flatten markers.

Supports:
- Dot notation: ``user.address.city``
- List indices inside dot paths: ``items.0.sku``
- Array-flatten paths: ``addresses[].street``
- Repeated flattening: ``departments[].employees[].name``

Nothing here raises on a missing or mismatched path. Lookups degrade to None
(or ``[]`` for array-flatten paths) and writes become no-ops.
"""

from typing import Any, List, Optional, Tuple

ARRAY_MARKER = "[]"


def _split_array_path(path: str) -> Tuple[str, str]:
    """Split on the first array marker: ``a.b[].c[].d`` -> (``a.b``, ``c[].d``)."""
    index = path.index(ARRAY_MARKER)
    array_path = path[:index]
    item_path = path[index + len(ARRAY_MARKER):]
    if item_path.startswith("."):
        item_path = item_path[1:]
    return array_path, item_path


def _step(current: Any, part: str) -> Tuple[bool, Any]:
    """Descend one segment. Returns (found, value)."""
    if isinstance(current, dict):
        if part in current:
            return True, current[part]
        return False, None

    if isinstance(current, list) and part.isdigit():
        index = int(part)
        if index < len(current):
            return True, current[index]

    return False, None


def get_value(obj: Any, path: Optional[str] = None) -> Any:
    """
    Get a nested value.

    Args:
        obj: Source record
        path: Dot path, optionally with ``[]`` markers

    Returns:
        Value at path, a flat list for array-flatten paths, or None

    Example:
        >>> get_value({"user": {"address": {"city": "Boston"}}}, "user.address.city")
        'Boston'
    """
    if not path:
        return obj

    if obj is None:
        return None

    if ARRAY_MARKER in path:
        return get_array_item_values(obj, path)

    current = obj
    for part in path.split("."):
        found, current = _step(current, part)
        if not found:
            return None

    return current


def get_array_item_values(obj: Any, path: Optional[str] = None) -> List[Any]:
    """
    Collect values from every item of an array.

    Example:
        >>> get_array_item_values({"addresses": [{"street": "A"}, {"street": "B"}]},
        ...                       "addresses[].street")
        ['A', 'B']
    """
    if not path or ARRAY_MARKER not in path:
        return []

    array_path, item_path = _split_array_path(path)
    array = get_value(obj, array_path)

    if not isinstance(array, list):
        return []

    if not item_path:
        return list(array)

    if ARRAY_MARKER in item_path:
        flattened = []
        for item in array:
            flattened.extend(get_array_item_values(item, item_path))
        return flattened

    return [get_value(item, item_path) for item in array]


def has_path(obj: Any, path: Optional[str] = None) -> bool:
    """True if the path resolves to something other than None."""
    return get_value(obj, path) is not None


def set_value(obj: Any, path: Optional[str], value: Any) -> None:
    """
    Set a nested value, creating intermediate objects as needed.

    For array-flatten paths the array is created when missing. A list value is
    written item by item (creating items); a scalar value goes into item 0.
    """
    if not path or not isinstance(obj, dict):
        return

    if ARRAY_MARKER in path:
        _set_array_item_values(obj, path, value)
        return

    parts = path.split(".")
    current = obj

    for part in parts[:-1]:
        if not isinstance(current.get(part), dict):
            current[part] = {}
        current = current[part]

    current[parts[-1]] = value


def _set_array_item_values(obj: dict, path: str, values: Any) -> None:
    array_path, item_path = _split_array_path(path)

    array = get_value(obj, array_path) if array_path else None
    if not isinstance(array, list):
        array = []
        set_value(obj, array_path, array)
        if not array_path:
            return

    if isinstance(values, list):
        pairs = list(enumerate(values))
    else:
        pairs = [(0, values)]

    for index, item_value in pairs:
        while len(array) <= index:
            array.append({})

        if item_path:
            if not isinstance(array[index], dict):
                array[index] = {}
            set_value(array[index], item_path, item_value)
        else:
            array[index] = item_value


def delete_path(obj: Any, path: Optional[str]) -> bool:
    """
    Delete the last key of a dot path.

    Returns:
        True if something was deleted
    """
    if not path or not isinstance(obj, dict):
        return False

    parts = path.split(".")
    current = obj

    for part in parts[:-1]:
        current = current.get(part)
        if not isinstance(current, dict):
            return False

    if parts[-1] in current:
        del current[parts[-1]]
        return True

    return False
