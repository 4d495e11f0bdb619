from .exceptions import InvalidVersionFormat, ModCompatError, VersionFileNotFound, VersionReadFailure
from .models import Compatibility, CompatibilityVersion, ModDefinition
from .resolver import CompatibilityResolver
from .state import CompatibilityState
from .table import CompatibilityVersionTable
from .utils import parse_version

__all__ = [
    "Compatibility",
    "CompatibilityResolver",
    "CompatibilityState",
    "CompatibilityVersion",
    "CompatibilityVersionTable",
    "InvalidVersionFormat",
    "ModCompatError",
    "ModDefinition",
    "VersionFileNotFound",
    "VersionReadFailure",
    "parse_version",
]
