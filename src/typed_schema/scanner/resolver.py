"""Generic bindings for resolving type variables to concrete types."""

from __future__ import annotations

import logging
from collections.abc import Mapping

from typed_schema.index import FieldInfo, TypeIndex, TypeInfo
from typed_schema.types import (
    OBJECT_TYPE,
    ArrayRef,
    ParameterizedRef,
    TypeRef,
    TypeVariableRef,
    WildcardRef,
    is_type_variable,
    resolve_wildcard,
    type_arguments,
)

logger = logging.getLogger(__name__)


class TypeResolver:
    """Maps the generic parameters of one traversal frame to concrete types.

    Lookups that miss the frame's own bindings continue outward through the
    enclosing resolver. A resolver created for a generic type only answers
    for variables owned by that type, and a parameter it declares but leaves
    unbound (a raw use) ends the lookup. Unbound variables fall back to their
    first declared bound, then to ``Object``. ``resolve`` never returns a
    type variable.
    """

    def __init__(
        self,
        bindings: Mapping[str, TypeRef] | None = None,
        parent: TypeResolver | None = None,
        owner: str | None = None,
        declared: tuple[str, ...] = (),
    ) -> None:
        self._bindings: dict[str, TypeRef] = dict(bindings or {})
        self._parent = parent
        self._owner = owner
        self._declared = frozenset(declared) | frozenset(self._bindings)

    @classmethod
    def for_type(
        cls,
        ref: TypeRef,
        type_info: TypeInfo | None,
        parent: TypeResolver | None = None,
    ) -> TypeResolver:
        """Bind the declared parameters of ``type_info`` to the arguments of ``ref``.

        Arguments are resolved against ``parent`` first, so bindings only ever
        hold concrete types. A raw (unparameterized) use binds nothing.
        """
        context = parent if parent is not None else cls()
        bindings: dict[str, TypeRef] = {}
        if type_info is None:
            return cls(bindings, parent)
        for param, arg in zip(type_info.type_parameters, type_arguments(ref)):
            resolved = context.resolve(arg)
            if isinstance(resolved, WildcardRef):
                resolved = context.resolve(resolve_wildcard(resolved))
            bindings[param.identifier] = resolved
        return cls(bindings, parent, owner=type_info.name, declared=tuple(type_info.parameter_names))

    @property
    def parent(self) -> TypeResolver | None:
        return self._parent

    @property
    def owner(self) -> str | None:
        """Name of the generic type this scope binds, or None for an ad hoc scope."""
        return self._owner

    @property
    def bindings(self) -> dict[str, TypeRef]:
        return dict(self._bindings)

    def resolve(self, ref: TypeRef) -> TypeRef:
        """Substitute every type variable in ``ref`` with its bound type."""
        if is_type_variable(ref):
            return self._resolve_variable(ref)
        if isinstance(ref, ArrayRef):
            return ArrayRef(self.resolve(ref.component))
        if isinstance(ref, ParameterizedRef):
            return ParameterizedRef(ref.class_name, tuple(self.resolve(a) for a in ref.arguments))
        if isinstance(ref, WildcardRef):
            return WildcardRef(
                extends_bound=self.resolve(ref.extends_bound) if ref.extends_bound is not None else None,
                super_bound=self.resolve(ref.super_bound) if ref.super_bound is not None else None,
            )
        return ref

    def _resolve_variable(self, ref: TypeRef) -> TypeRef:
        owner = ref.owner if isinstance(ref, TypeVariableRef) else None
        resolver: TypeResolver | None = self
        while resolver is not None:
            if owner is not None and resolver._owner is not None and resolver._owner != owner:
                resolver = resolver._parent
                continue
            bound = resolver._bindings.get(ref.name)
            if bound is not None:
                return bound
            if resolver._owner is not None and ref.name in resolver._declared:
                # Declared here but left unbound
                break
            resolver = resolver._parent

        if isinstance(ref, TypeVariableRef) and ref.bounds:
            # The variable may occur in its own bound (T extends Comparable<T>)
            unbound = TypeResolver({ref.identifier: OBJECT_TYPE}, self)
            resolved = unbound.resolve(ref.bounds[0])
            logger.debug("Unbound type variable %s resolved to its bound %s", ref, resolved)
            return resolved

        logger.debug("Unbound type variable %s resolved to %s", ref, OBJECT_TYPE)
        return OBJECT_TYPE


def get_all_fields(
    index: TypeIndex,
    type_info: TypeInfo,
    resolver: TypeResolver,
) -> list[tuple[FieldInfo, TypeResolver]]:
    """Return own and inherited instance fields with the resolver for each.

    Ancestor fields come first; a subtype field shadows an ancestor field of
    the same name. Supertype arguments are resolved in the subtype's scope,
    so a field typed by an ancestor's parameter resolves correctly.
    """
    chain: list[tuple[TypeInfo, TypeResolver]] = []
    seen: set[str] = set()
    info: TypeInfo | None = type_info
    current = resolver
    while info is not None and info.name not in seen:
        seen.add(info.name)
        chain.append((info, current))
        if info.supertype is None:
            break
        super_ref = current.resolve(info.supertype)
        super_info = index.type_info(super_ref)
        if super_info is None:
            logger.debug("Supertype %s of %s is not indexed", super_ref, info.name)
            break
        current = TypeResolver.for_type(super_ref, super_info, parent=current)
        info = super_info

    collected: dict[str, tuple[FieldInfo, TypeResolver]] = {}
    for info, field_resolver in reversed(chain):
        for f in info.fields:
            if f.is_static:
                continue
            collected[f.name] = (f, field_resolver)
    return list(collected.values())
