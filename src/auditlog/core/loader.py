"""Resolve fully-qualified type names to classes and back."""

import importlib
from collections.abc import Iterable

from auditlog.core.errors import TypeNotFoundError
from auditlog.core.schema import SchemaIntrospector


def name_of(cls: type) -> str:
    """Return the fully-qualified name of ``cls``."""
    return f"{cls.__module__}.{cls.__qualname__}"


def names_of(classes: Iterable[type]) -> list[str]:
    """Return the sorted fully-qualified names of ``classes``."""
    return sorted(name_of(cls) for cls in classes)


class TypeLoader:
    """Loads types by name.

    Names of mapped types are resolved against the schema first, so a
    mapped type is found even when its module is not importable under the
    recorded name. Other names are imported unless ``allow_import`` is off,
    in which case only mapped types are ever returned.
    """

    def __init__(
        self,
        introspector: SchemaIntrospector | None = None,
        allow_import: bool = True,
    ) -> None:
        self.introspector = introspector
        self.allow_import = allow_import

    def load_by_name(self, name: str) -> type:
        """Load the type with fully-qualified ``name``.

        Raises:
            TypeNotFoundError: If no such type exists
        """
        name = name.strip()
        if self.introspector is not None:
            for cls in self.introspector.types_with_metadata():
                if name_of(cls) == name:
                    return cls

        if not self.allow_import:
            raise TypeNotFoundError(name=name)
        return _import_type(name)


def _import_type(name: str) -> type:
    parts = name.split(".")
    # Try the longest importable module prefix, then walk the qualname
    for split in range(len(parts) - 1, 0, -1):
        module_name = ".".join(parts[:split])
        try:
            obj: object = importlib.import_module(module_name)
        except (ImportError, ValueError):
            continue
        try:
            for attr in parts[split:]:
                obj = getattr(obj, attr)
        except AttributeError:
            break
        if isinstance(obj, type):
            return obj
        break

    raise TypeNotFoundError(name=name)
