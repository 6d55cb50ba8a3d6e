"""
Inscriptions: domain-separated digests of structured values.

An inscription binds a value's content to its context: the type's mark, the
names of its fields, nested inscriptions of its sub-structures and any
additional context bytes (protocol version, domain parameters). Components are
combined with TupleHash256 (NIST SP 800-185), customized with the mark, so

  - two different component sequences cannot collide by concatenation, and
  - two types with identical field content but different marks never share
    a digest.

A type becomes inscribable either by writing `get_mark()` and
`get_inscription()` by hand (use `combine()` to stay consistent), or by
declaring its fields with the `inscribable` decorator:

    @inscribable(additional="context")
    @dataclass
    class Proof:
        basis: Point                                      # nested inscription
        challenge: bytes = inscribe_field(SERIALIZE)      # canonical bytes
        cache: dict = inscribe_field(SKIP, default_factory=dict)

        def context(self):
            return b"proof-v1"
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass
from typing import Any, Callable, Iterable, Optional, Protocol, Sequence, Tuple, Union, runtime_checkable

from Crypto.Hash import TupleHash256

import canonical
from errors import ContextError

# TupleHash256 output length; not configurable.
INSCRIPTION_DIGEST_BYTES = 64

METADATA_HANDLING = "inscribe"
METADATA_NAME = "inscribe_name"


class Handling(enum.Enum):
    RECURSE = "recurse"
    SERIALIZE = "serialize"
    SKIP = "skip"


RECURSE = Handling.RECURSE
SERIALIZE = Handling.SERIALIZE
SKIP = Handling.SKIP


@dataclass(frozen=True)
class Inscription:
    """A mark plus the fixed-length digest computed under that mark."""

    mark: str
    digest: bytes

    def to_bytes(self) -> bytes:
        # digest is fixed-length, so digest || mark splits unambiguously
        return self.digest + self.mark.encode("utf-8")

    def hex(self) -> str:
        return self.digest.hex()


@runtime_checkable
class Inscribable(Protocol):
    def get_mark(self) -> str: ...

    def get_inscription(self) -> Inscription: ...


@dataclass(frozen=True)
class FieldRule:
    """How one attribute takes part in an inscription."""

    attr: str
    handling: Handling = Handling.RECURSE
    name: Optional[str] = None

    @property
    def label(self) -> str:
        return self.name or self.attr


def recurse(attr: str, name: Optional[str] = None) -> FieldRule:
    return FieldRule(attr, Handling.RECURSE, name)


def serialize(attr: str, name: Optional[str] = None) -> FieldRule:
    return FieldRule(attr, Handling.SERIALIZE, name)


def inscribe_field(handling: Handling = Handling.RECURSE, *, name: Optional[str] = None, **field_kwargs: Any) -> Any:
    """
    A `dataclasses.field` that records how the field is inscribed.

    Args:
        handling: RECURSE (default), SERIALIZE or SKIP
        name: Component label to use instead of the attribute name
        **field_kwargs: Passed through to dataclasses.field (default, ...)
    """
    metadata = dict(field_kwargs.pop("metadata", None) or {})
    metadata[METADATA_HANDLING] = Handling(handling)
    if name is not None:
        metadata[METADATA_NAME] = name
    return dataclasses.field(metadata=metadata, **field_kwargs)


def inscribe(value: Any) -> Inscription:
    """
    Compute the inscription of `value`.

    Raises:
        TypeError: if `value` is not inscribable
        ContextError: if its additional-context function fails
    """
    if not isinstance(value, Inscribable):
        raise TypeError(f"{type(value).__name__} is not inscribable")
    inscription = value.get_inscription()
    if not isinstance(inscription, Inscription):
        raise TypeError(
            f"{type(value).__name__}.get_inscription() returned {type(inscription).__name__}, expected Inscription"
        )
    return inscription


def combine(
    mark: str,
    components: Iterable[bytes],
    additional: bytes = b"",
) -> Inscription:
    """
    Combine ordered byte components into an inscription under `mark`.

    Args:
        mark: Domain-separation string (TupleHash customization)
        components: Byte strings, each absorbed as one tuple element
        additional: Trailing context bytes, always absorbed (even when empty)

    Returns:
        Inscription: The mark and an INSCRIPTION_DIGEST_BYTES digest
    """
    hasher = TupleHash256.new(digest_bytes=INSCRIPTION_DIGEST_BYTES, custom=mark.encode("utf-8"))
    for component in components:
        hasher.update(bytes(component))
    hasher.update(bytes(additional))
    return Inscription(mark=mark, digest=hasher.digest())


MarkSpec = Union[str, Callable[[Any], str], None]
AdditionalSpec = Union[str, Callable[[Any], bytes], None]


def _rules_for(cls: type, fields: Optional[Sequence[Union[FieldRule, str]]]) -> Tuple[FieldRule, ...]:
    if fields is not None:
        return tuple(f if isinstance(f, FieldRule) else FieldRule(f) for f in fields)
    if not dataclasses.is_dataclass(cls):
        raise TypeError(f"{cls.__name__}: pass fields= for classes that are not dataclasses")
    rules = []
    for f in dataclasses.fields(cls):
        handling = Handling(f.metadata.get(METADATA_HANDLING, Handling.RECURSE))
        rules.append(FieldRule(f.name, handling, f.metadata.get(METADATA_NAME)))
    return tuple(rules)


def _resolve_mark(cls: type, mark: MarkSpec) -> Callable[[Any], str]:
    if mark is None:
        name = cls.__name__
        return lambda self: name
    if isinstance(mark, str):
        # a method of the class computes the mark; any other string is literal
        if callable(getattr(cls, mark, None)):
            method_name = mark
            return lambda self: getattr(self, method_name)()
        return lambda self: mark
    if callable(mark):
        return mark
    raise TypeError(f"{cls.__name__}: mark must be a string or a callable")


def _resolve_additional(cls: type, additional: AdditionalSpec) -> Callable[[Any], bytes]:
    if additional is None:
        return lambda self: b""
    if isinstance(additional, str):
        method_name = additional
        return lambda self: getattr(self, method_name)()
    if callable(additional):
        return additional
    raise TypeError(f"{cls.__name__}: additional must be a method name or a callable")


def _additional_bytes(value: Any, fn: Callable[[Any], bytes]) -> bytes:
    try:
        out = fn(value)
    except ContextError:
        raise
    except Exception as exc:
        raise ContextError(
            f"additional context for {type(value).__name__} failed: {exc}",
            {"type": type(value).__name__},
        ) from exc
    if not isinstance(out, (bytes, bytearray)):
        raise ContextError(
            "additional context must be bytes",
            {"type": type(value).__name__, "returned": type(out).__name__},
        )
    return bytes(out)


def _components(value: Any, rules: Sequence[FieldRule]) -> Iterable[bytes]:
    for rule in rules:
        if rule.handling is Handling.SKIP:
            continue
        member = getattr(value, rule.attr)
        yield rule.label.encode("utf-8")
        if rule.handling is Handling.SERIALIZE:
            yield canonical.to_bytes(member)
        else:
            nested = inscribe(member)
            yield nested.mark.encode("utf-8")
            yield nested.digest


def inscribable(
    cls: Optional[type] = None,
    *,
    mark: MarkSpec = None,
    additional: AdditionalSpec = None,
    fields: Optional[Sequence[Union[FieldRule, str]]] = None,
):
    """
    Class decorator that makes instances inscribable from their field declarations.

    Args:
        mark: Name of a zero-argument method returning the mark, a literal
            mark, or a callable taking the instance (default: class name)
        additional: Name of a zero-argument method, or a callable taking the
            instance, returning additional context bytes
        fields: Explicit ordered FieldRules (or attribute names, recursed);
            required for classes that are not dataclasses

    Returns:
        The decorated class, with `get_mark`, `get_inscription` and
        `__inscription_rules__`
    """

    def wrap(klass: type) -> type:
        rules = _rules_for(klass, fields)
        mark_fn = _resolve_mark(klass, mark)
        additional_fn = _resolve_additional(klass, additional)

        def get_mark(self) -> str:
            return mark_fn(self)

        def get_inscription(self) -> Inscription:
            # Materialize components first so serialization errors surface
            # before the context function runs.
            parts = list(_components(self, rules))
            return combine(get_mark(self), parts, _additional_bytes(self, additional_fn))

        klass.get_mark = get_mark
        klass.get_inscription = get_inscription
        klass.__inscription_rules__ = rules
        return klass

    if cls is not None:
        return wrap(cls)
    return wrap


__all__ = [
    "Handling",
    "RECURSE",
    "SERIALIZE",
    "SKIP",
    "Inscription",
    "Inscribable",
    "FieldRule",
    "recurse",
    "serialize",
    "inscribe_field",
    "inscribe",
    "combine",
    "INSCRIPTION_DIGEST_BYTES",
    "inscribable",
]
