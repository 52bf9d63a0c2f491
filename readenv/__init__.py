"""Read environment variables into typed dataclass fields."""

from readenv.binder import read_env
from readenv.errors import DestinationTypeError, FieldError, ReadEnvError
from readenv.fields import EnvVar, FieldDescriptor, ScalarKind, describe_fields, env
from readenv.logging import get_logger, setup_logging

__all__ = [
    "read_env",
    "describe_fields",
    "env",
    "EnvVar",
    "FieldDescriptor",
    "ScalarKind",
    "ReadEnvError",
    "DestinationTypeError",
    "FieldError",
    "get_logger",
    "setup_logging",
]

__version__ = "0.1.0"
