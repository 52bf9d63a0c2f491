"""Binding annotations and field introspection for dataclass records."""

import dataclasses
import enum
import sys
import typing
from dataclasses import MISSING, dataclass
from typing import Any, Dict, List, Mapping, NamedTuple, Optional

from readenv.errors import DestinationTypeError, FieldError

# Key under which the variable name is stored in dataclass field metadata
METADATA_KEY = "env"


class ScalarKind(str, enum.Enum):
    """Declared types the binder knows how to convert."""

    INT = "int"
    FLOAT = "float"
    STR = "str"
    BOOL = "bool"


# Exact matches only: bool must not be treated as int
_KINDS: Dict[Any, ScalarKind] = {
    int: ScalarKind.INT,
    float: ScalarKind.FLOAT,
    str: ScalarKind.STR,
    bool: ScalarKind.BOOL,
}

# Fallback for string annotations that get_type_hints could not resolve
_BUILTIN_NAMES: Dict[str, Any] = {tp.__name__: tp for tp in _KINDS}


@dataclass(frozen=True)
class EnvVar:
    """Marker for ``Annotated`` hints, e.g. ``Annotated[int, EnvVar("PORT")]``."""

    name: str

    def __post_init__(self):
        _check_env_name(self.name)


class FieldDescriptor(NamedTuple):
    """What the binder needs to know about one dataclass field."""

    name: str
    kind: Optional[ScalarKind]
    env_name: Optional[str]
    writable: bool

    @property
    def bound(self) -> bool:
        return self.env_name is not None


def env(name: str, default: Any = MISSING, default_factory: Any = MISSING, **kwargs) -> Any:
    """Declare a dataclass field bound to the environment variable ``name``.

    Example:
        @dataclass
        class Options:
            port: int = env("PORT", default=0)

    Extra keyword arguments are passed to ``dataclasses.field``; any
    ``metadata`` given there is kept alongside the binding.
    """
    _check_env_name(name)
    metadata = dict(kwargs.pop("metadata", None) or {})
    metadata[METADATA_KEY] = name
    return dataclasses.field(
        default=default,
        default_factory=default_factory,
        metadata=metadata,
        **kwargs,
    )


def scalar_kind(tp: Any) -> Optional[ScalarKind]:
    """Return the scalar kind for a declared type, or None if unsupported."""
    if typing.get_origin(tp) is typing.Annotated:
        tp = typing.get_args(tp)[0]
    if isinstance(tp, str):
        tp = _BUILTIN_NAMES.get(tp)
    try:
        return _KINDS.get(tp)
    except TypeError:
        # unhashable annotation objects
        return None


def describe_fields(cls: type) -> List[FieldDescriptor]:
    """Describe the fields of a dataclass type in declaration order."""
    if not (isinstance(cls, type) and dataclasses.is_dataclass(cls)):
        raise DestinationTypeError(cls if isinstance(cls, type) else type(cls))

    frozen = cls.__dataclass_params__.frozen
    hints = _type_hints(cls)

    descriptors = []
    for f in dataclasses.fields(cls):
        declared = hints.get(f.name, f.type)
        descriptors.append(
            FieldDescriptor(
                name=f.name,
                kind=scalar_kind(declared),
                env_name=_binding(f.metadata, declared),
                writable=not frozen and not f.name.startswith("_"),
            )
        )
    return descriptors


def _binding(metadata: Mapping[str, Any], declared: Any) -> Optional[str]:
    """Find the bound variable name; field metadata wins over Annotated."""
    if METADATA_KEY in metadata:
        return metadata[METADATA_KEY]
    if typing.get_origin(declared) is typing.Annotated:
        for extra in typing.get_args(declared)[1:]:
            if isinstance(extra, EnvVar):
                return extra.name
    return None


def _type_hints(cls: type) -> Dict[str, Any]:
    try:
        return typing.get_type_hints(cls, include_extras=True)
    except NameError:
        # One unresolvable annotation must not hide the bindings of the others
        return {f.name: _resolve_annotation(cls, f) for f in dataclasses.fields(cls)}


def _resolve_annotation(cls: type, f: dataclasses.Field) -> Any:
    """Evaluate a single string annotation against its module namespace."""
    if not isinstance(f.type, str):
        return f.type
    module = sys.modules.get(cls.__module__)
    globalns = dict(vars(module)) if module is not None else {}
    localns = {"Annotated": typing.Annotated, "EnvVar": EnvVar, **_BUILTIN_NAMES}
    try:
        return eval(f.type, globalns, localns)
    except (NameError, AttributeError) as e:
        if "EnvVar" in f.type:
            raise FieldError(f.name, f"cannot resolve annotation {f.type!r}") from e
        return f.type


def _check_env_name(name: Any) -> None:
    if not isinstance(name, str) or not name:
        raise ValueError(f"environment variable name must be a non-empty string, got {name!r}")
