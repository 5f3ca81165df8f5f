"""Helpers shared by the Swagger 2.0 and OpenAPI 3.x adapters.

Parameter merging follows both specifications: path-level parameters
provide defaults, and operation-level parameters override them when they share
the same ``name`` and ``in`` values.
"""

from __future__ import annotations

import re
from typing import Any

from taxos.exceptions import InvalidParameterError
from taxos.models import HTTPMethod, ParameterLocation
from taxos.parser.resolver import deref

# HTTP methods recognised on a path item.
HTTP_METHODS = frozenset(m.value for m in HTTPMethod)

_IDENT_SPLIT_RE = re.compile(r"[^a-zA-Z0-9]+")


def iter_operations(path_item: dict[str, Any]) -> list[tuple[str, dict[str, Any]]]:
    """Return ``(method, operation)`` pairs of a path item in document order.

    Non-method keys (``parameters``, ``summary``, ``servers``, ``x-*``) are
    skipped.
    """
    return [
        (key, value)
        for key, value in path_item.items()
        if key in HTTP_METHODS and isinstance(value, dict)
    ]


def merge_parameters(
    path_params: list[dict[str, Any]],
    op_params: list[dict[str, Any]],
    root: dict[str, Any],
) -> list[dict[str, Any]]:
    """Dereference and merge path-level and operation-level parameters.

    Operation-level parameters override path-level parameters with the same
    name and location (``in`` field).

    Args:
        path_params: Parameters defined at the path level.
        op_params: Parameters defined at the operation level.
        root: The raw document, used to follow ``$ref`` parameters.

    Returns:
        A merged list of concrete parameter dicts.
    """
    path_params = [deref(p, root) for p in path_params]
    op_params = [deref(p, root) for p in op_params]

    op_keys = {(p.get("name", ""), p.get("in", "")) for p in op_params}

    merged = [
        p for p in path_params if (p.get("name", ""), p.get("in", "")) not in op_keys
    ]
    merged.extend(op_params)
    return merged


def parse_location(param: dict[str, Any]) -> ParameterLocation:
    """Return the transport location of a raw parameter.

    Raises:
        InvalidParameterError: If ``in`` is missing or not a known location.
    """
    location = param.get("in")
    try:
        return ParameterLocation(location)
    except ValueError:
        raise InvalidParameterError(
            f"Parameter '{param.get('name', '?')}' has unrecognised location "
            f"'in: {location}'"
        ) from None


def derive_operation_id(method: str, path: str) -> str:
    """Build a camelCase operation id for operations that do not declare one.

    Example::

        >>> derive_operation_id("get", "/pets/{petId}")
        'getPetsPetId'
    """
    words = [w for w in _IDENT_SPLIT_RE.split(path) if w]
    return method.lower() + "".join(w[0].upper() + w[1:] for w in words)


class OperationIdAllocator:
    """Hand out operation ids, deriving unique ones for operations without one.

    Every ``operationId`` the document declares is reserved up front, so a
    derived id never takes a declared name.  Derived ids that collide with a
    name already in use get a numeric suffix (``getPetsId2``,
    ``getPetsId3``, ...).  Declared ids are returned as-is; two operations
    declaring the same id are still reported by the normalizer.

    Example::

        >>> ids = OperationIdAllocator({"paths": {}})
        >>> ids.allocate({}, "get", "/pets/{id}"), ids.allocate({}, "get", "/pets/{id}/")
        ('getPetsId', 'getPetsId2')
    """

    def __init__(self, raw: dict[str, Any]) -> None:
        self._used: set[str] = set()
        for path_item in (raw.get("paths") or {}).values():
            path_item = deref(path_item, raw)
            if not isinstance(path_item, dict):
                continue
            for _method, operation in iter_operations(path_item):
                declared = operation.get("operationId")
                if declared:
                    self._used.add(str(declared))

    def allocate(self, operation: dict[str, Any], method: str, path: str) -> str:
        """Return the declared id of ``operation``, else a fresh derived one."""
        declared = operation.get("operationId")
        if declared:
            return str(declared)

        base = derive_operation_id(method, path)
        candidate = base
        suffix = 2
        while candidate in self._used:
            candidate = f"{base}{suffix}"
            suffix += 1
        self._used.add(candidate)
        return candidate
