"""Resolve ``$ref`` JSON Reference pointers in Swagger / OpenAPI documents.

Two kinds of reference are handled here, and they are kept
apart:

* **Schema references** (``#/definitions/Pet`` or
  ``#/components/schemas/Pet``) are *never* dereferenced.  They become a
  stable type name plus an import path via :func:`resolve_reference`, which
  is what lets the normalizer walk self-referential schemas without any
  cycle bookkeeping.
* **Component references** (``#/parameters/Limit``,
  ``#/components/responses/NotFound``, ``#/components/requestBodies/Pet``)
  are inlined by the adapters via :func:`resolve_pointer`, since parameters,
  responses and request bodies have no identity of their own in the IR.

Only **internal** references (those starting with ``#/``) are supported.
External file or URL references raise
:class:`~taxos.exceptions.MalformedReferenceError`.
"""

from __future__ import annotations

import re
from typing import Any, NamedTuple

from taxos.exceptions import MalformedReferenceError, UnresolvedReferenceError
from taxos.models import ConverterContext

# Swagger 2.0 and OpenAPI 3.x homes of reusable schemas.
_SCHEMA_REF_RE = re.compile(r"^#/(?:definitions|components/schemas)/(?P<name>[^/]+)$")


class ResolvedReference(NamedTuple):
    """A schema reference reduced to its type name and import path."""

    name: str
    import_path: str


def _unescape(segment: str) -> str:
    """Decode RFC 6901 JSON Pointer escaping (``~1`` for ``/``, ``~0`` for ``~``)."""
    return segment.replace("~1", "/").replace("~0", "~")


def schema_ref_name(ref: str) -> str:
    """Return the schema name a reference points at.

    Args:
        ref: The ``$ref`` string (e.g., ``"#/components/schemas/Pet"``).

    Returns:
        The unescaped schema name (``"Pet"``).

    Raises:
        MalformedReferenceError: If *ref* is not a pointer into the
            document's reusable-schema section.
    """
    if not ref.startswith("#/"):
        raise MalformedReferenceError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )
    match = _SCHEMA_REF_RE.match(ref)
    if match is None:
        raise MalformedReferenceError(
            f"Unsupported schema $ref '{ref}': expected #/definitions/NAME "
            "or #/components/schemas/NAME"
        )
    return _unescape(match.group("name"))


def definition_import_path(name: str, ctx: ConverterContext) -> str:
    """Import path of the declaration module generated for schema *name*."""
    return f"{ctx.package_root}/{ctx.api_root}/{ctx.api_name}/definitions/{name}"


def resolve_reference(ref: str, ctx: ConverterContext) -> ResolvedReference:
    """Resolve a schema reference to a ``(name, import_path)`` pair.

    A pure function of *ref* and *ctx*: the same reference always maps to the
    same pair, which is what makes reference dictionaries safe to merge in
    any order.

    Args:
        ref: The ``$ref`` string.
        ctx: Converter context supplying the import prefix.

    Returns:
        A :class:`ResolvedReference`.

    Raises:
        MalformedReferenceError: If *ref* is not a schema reference.

    Example::

        >>> resolve_reference("#/definitions/Tag", ConverterContext(api_name="shop"))
        ResolvedReference(name='Tag', import_path='@/api/shop/definitions/Tag')
    """
    name = schema_ref_name(ref)
    return ResolvedReference(name=name, import_path=definition_import_path(name, ctx))


def resolve_pointer(ref: str, root: dict[str, Any]) -> Any:
    """Resolve a single ``$ref`` string against the root document.

    Parses JSON Pointer references like ``#/components/parameters/Limit``
    and navigates the root dict to locate the referenced value.

    Args:
        ref: The ``$ref`` string.
        root: The root document to resolve against.

    Returns:
        The value found at the referenced path.

    Raises:
        MalformedReferenceError: If the reference is external (does not
            start with ``#/``).
        UnresolvedReferenceError: If any segment in the pointer path does
            not exist in the document.
    """
    if not ref.startswith("#/"):
        raise MalformedReferenceError(
            f"External $ref not supported: {ref}. "
            "Only internal references (#/...) are handled."
        )

    current: Any = root
    for segment in ref[2:].split("/"):
        segment = _unescape(segment)

        if isinstance(current, dict):
            if segment not in current:
                raise UnresolvedReferenceError(
                    f"Cannot resolve $ref '{ref}': "
                    f"key '{segment}' not found at path"
                )
            current = current[segment]
        elif isinstance(current, list):
            try:
                current = current[int(segment)]
            except (ValueError, IndexError) as exc:
                raise UnresolvedReferenceError(
                    f"Cannot resolve $ref '{ref}': "
                    f"invalid array index '{segment}'"
                ) from exc
        else:
            raise UnresolvedReferenceError(
                f"Cannot resolve $ref '{ref}': "
                f"cannot navigate into {type(current).__name__}"
            )

    return current


def deref(obj: Any, root: dict[str, Any]) -> Any:
    """Follow ``$ref`` chains on a component object until a concrete value is reached.

    Used for parameters, responses and request bodies, which may point at
    other components that are themselves references. A chain that loops
    back on itself raises :class:`~taxos.exceptions.UnresolvedReferenceError`.
    """
    seen: set[str] = set()
    while isinstance(obj, dict) and "$ref" in obj:
        ref = obj["$ref"]
        if ref in seen:
            raise UnresolvedReferenceError(f"Circular $ref chain at '{ref}'")
        seen.add(ref)
        obj = resolve_pointer(ref, root)
    return obj
