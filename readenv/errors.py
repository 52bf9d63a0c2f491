"""Errors raised while binding environment variables."""

from typing import Optional


class ReadEnvError(Exception):
    """Base class for binding failures."""


class DestinationTypeError(ReadEnvError, TypeError):
    """The destination is not a dataclass instance."""

    def __init__(self, actual_type: type):
        self.actual_type = actual_type
        super().__init__(
            f"readenv: dest should be a dataclass instance, but was {_type_name(actual_type)}"
        )


class FieldError(ReadEnvError):
    """A single field could not be set.

    Attributes:
        field: Dataclass field name
        env_name: Environment variable bound to the field
        cause: Message describing what went wrong
    """

    def __init__(self, field: str, cause: str, env_name: Optional[str] = None):
        self.field = field
        self.env_name = env_name
        self.cause = cause
        super().__init__(f"readenv: could not set {field}: {cause}")


def _type_name(tp: type) -> str:
    module = getattr(tp, "__module__", "builtins")
    qualname = getattr(tp, "__qualname__", repr(tp))
    if module == "builtins":
        return qualname
    return f"{module}.{qualname}"
