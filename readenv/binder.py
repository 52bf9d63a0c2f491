"""Read environment variables into dataclass fields.

Add a binding to each field that should be populated, then pass an
instance to :func:`read_env`:

    @dataclass
    class Options:
        port: int = env("PORT", default=0)
        debug: Annotated[bool, EnvVar("DEBUG")] = False

    opts = Options()
    read_env(opts)

Fields without a binding, and bound fields whose declared type is not
``int``, ``float``, ``str`` or ``bool``, are left alone.

Boolean fields are False when the variable is unset, empty, or one of
"no", "off", "0" (case-insensitive). Any other value makes them True.
"""

import dataclasses
import math
import os
import re
from typing import Any, Callable, Dict, Mapping, Optional

from readenv import config
from readenv.errors import DestinationTypeError, FieldError
from readenv.fields import FieldDescriptor, ScalarKind, describe_fields
from readenv.logging import bind_target_var, get_logger

logger = get_logger(__name__)

_INT_PATTERN = re.compile(r"[+-]?[0-9]+")
_FALSE_VALUES = frozenset({"", "no", "off", "0"})
_INF_SPELLINGS = frozenset({"inf", "infinity"})


class _ConversionError(Exception):
    """Raised by converters; becomes the cause of a FieldError."""


def read_env(dest: Any, environ: Optional[Mapping[str, str]] = None) -> None:
    """Populate the bound fields of a dataclass instance from the environment.

    Args:
        dest: Dataclass instance, mutated in place
        environ: Mapping to read instead of ``os.environ``

    Raises:
        DestinationTypeError: dest is not a dataclass instance
        FieldError: first field that could not be set; later fields are
            not processed
    """
    if isinstance(dest, type) or not dataclasses.is_dataclass(dest):
        raise DestinationTypeError(type(dest))

    source = os.environ if environ is None else environ
    target = type(dest).__qualname__
    token = bind_target_var.set(target)
    try:
        logger.debug("Reading environment into %s", target)
        for descriptor in describe_fields(type(dest)):
            _read_field(dest, descriptor, source)
        logger.debug("Finished reading environment into %s", target)
    finally:
        bind_target_var.reset(token)


def _read_field(dest: Any, descriptor: FieldDescriptor, environ: Mapping[str, str]) -> None:
    if not descriptor.bound:
        logger.debug("Skipping %s: no binding", descriptor.name)
        return
    if not descriptor.writable:
        raise FieldError(descriptor.name, "field is not writeable", descriptor.env_name)

    convert = _CONVERTERS.get(descriptor.kind)
    if convert is None:
        logger.debug("Skipping %s: unsupported type", descriptor.name)
        return

    # Unset variables read as empty, same as os.getenv(name, "")
    raw = environ.get(descriptor.env_name, "")
    try:
        value = convert(descriptor.env_name, raw)
    except _ConversionError as e:
        raise FieldError(descriptor.name, str(e), descriptor.env_name) from e.__cause__

    setattr(dest, descriptor.name, value)
    logger.debug(
        "Set %s from %s = %s",
        descriptor.name,
        descriptor.env_name,
        repr(value) if config.TRACE_VALUES else config.VALUE_MASK,
    )


def _read_int(name: str, raw: str) -> int:
    if not _INT_PATTERN.fullmatch(raw):
        raise _ConversionError(f"{name} is not a number: parsing {raw!r}: invalid syntax")
    try:
        return int(raw, 10)
    except ValueError as e:
        # Digit strings past the interpreter's conversion limit
        raise _ConversionError(f"{name} is not a number: parsing {raw!r}: value out of range") from e


def _read_float(name: str, raw: str) -> float:
    # float() alone would accept padding and digit separators
    if raw != raw.strip() or "_" in raw:
        raise _ConversionError(f"{name} is not a float: parsing {raw!r}: invalid syntax")
    try:
        value = float(raw)
    except ValueError as e:
        raise _ConversionError(f"{name} is not a float: parsing {raw!r}: invalid syntax") from e
    # Overflow to infinity is an error; only an explicit inf spelling yields one
    if math.isinf(value) and raw.lstrip("+-").lower() not in _INF_SPELLINGS:
        raise _ConversionError(f"{name} is not a float: parsing {raw!r}: value out of range")
    return value


def _read_str(name: str, raw: str) -> str:
    value = raw.strip()
    if not value:
        raise _ConversionError(f"{name} is not set")
    return value


def _read_bool(name: str, raw: str) -> bool:
    return raw.strip().lower() not in _FALSE_VALUES


_CONVERTERS: Dict[ScalarKind, Callable[[str, str], Any]] = {
    ScalarKind.INT: _read_int,
    ScalarKind.FLOAT: _read_float,
    ScalarKind.STR: _read_str,
    ScalarKind.BOOL: _read_bool,
}
