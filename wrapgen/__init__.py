"""
Interface Wrapper Generator Package

Parses restricted C++-header-like interface files and generates:
  1. MATLAB proxy classes, one per declared class
  2. MEX glue sources for constructors, methods and static methods
  3. An aggregate make script and Makefile for the toolbox
"""

from .types import (
    Argument, Category, ReturnSlot, ReturnValue,
    Constructor, Method, StaticMethod, Class, Module,
)
from .errors import WrapError, ParseFailed, DependencyMissing, CantOpenFile
from .parser import InterfaceParser, load_module
from .type_mapper import TypeMapper, BASIS_TYPES, EIGEN_TYPES
from .validator import (
    known_types, verify_arguments, verify_return_types, verify_class, verify_module,
)
from .matlab_generator import MatlabGenerator
from .toolbox_generator import ToolboxGenerator

__all__ = [
    'Argument', 'Category', 'ReturnSlot', 'ReturnValue',
    'Constructor', 'Method', 'StaticMethod', 'Class', 'Module',
    'WrapError', 'ParseFailed', 'DependencyMissing', 'CantOpenFile',
    'InterfaceParser', 'load_module',
    'TypeMapper', 'BASIS_TYPES', 'EIGEN_TYPES',
    'known_types', 'verify_arguments', 'verify_return_types', 'verify_class', 'verify_module',
    'MatlabGenerator', 'ToolboxGenerator',
]
