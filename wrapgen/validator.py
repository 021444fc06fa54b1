"""Semantic checks run on a fully parsed Module"""

from .errors import DependencyMissing
from .type_mapper import BASIS_TYPES, EIGEN_TYPES
from .types import Category, Class, Module


def known_types(module: Module) -> frozenset[str]:
    """Built-in types plus the qualified name of every declared class.

    Collected after the whole file is parsed, so a class may refer to one
    declared further down.
    """
    names = set(BASIS_TYPES) | set(EIGEN_TYPES)
    names.update(cls.qualified_name("::") for cls in module.classes)
    return frozenset(names)


def verify_arguments(valid_types, members) -> None:
    for member in members:
        for arg in member.args:
            full_type = arg.qualified_type("::")
            if full_type not in valid_types:
                raise DependencyMissing(full_type, member.name)


def verify_return_types(valid_types, members) -> None:
    for member in members:
        for slot in member.return_value.slots:
            if slot.category is not Category.CLASS:
                continue
            full_type = slot.qualified_type("::")
            if full_type not in valid_types:
                raise DependencyMissing(full_type, member.name)


def verify_class(valid_types, cls: Class) -> None:
    """Check every argument and returned class of one class's members"""
    verify_arguments(valid_types, cls.constructors)
    verify_arguments(valid_types, cls.static_methods)
    verify_arguments(valid_types, cls.methods)
    verify_return_types(valid_types, cls.static_methods)
    verify_return_types(valid_types, cls.methods)


def verify_module(module: Module) -> None:
    valid_types = known_types(module)
    for cls in module.classes:
        verify_class(valid_types, cls)
