from functools import cache
from importlib import import_module
from importlib.util import find_spec
from types import ModuleType

_EXTENSION_MODULES: dict[str, str] = {
    "scipy": "maybe_inplace.ext.sparse",
}


@cache
def load_extension(package_name: str) -> ModuleType | None:
    """Load the extension module for one third-party package, once."""
    module_name = _EXTENSION_MODULES.get(package_name)
    if module_name is None or find_spec(package_name) is None:
        return None
    return import_module(module_name)


def ensure_extension_for(value: object) -> bool:
    """Load the extension owning value's type; return whether one was loaded."""
    package_name = type(value).__module__.partition(".")[0]
    if package_name not in _EXTENSION_MODULES:
        return False
    return load_extension(package_name) is not None


__all__ = ["ensure_extension_for", "load_extension"]
