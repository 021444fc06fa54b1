"""Parser for the restricted C++-header-like interface format"""

import re
from dataclasses import replace
from pathlib import Path

from lark import Lark, Token, Transformer
from lark.exceptions import UnexpectedEOF, UnexpectedInput, UnexpectedToken, VisitError

from .errors import CantOpenFile, ParseFailed, WrapError
from .types import (
    Argument, Category, Class, Constructor, Method, Module,
    ReturnSlot, ReturnValue, StaticMethod,
)


# Keywords and built-in type names are string terminals, so the lexer always
# reports them as themselves and never as CLASS_NAME or LOWER_NAME.
_GRAMMAR = r"""
start: _item*

_item: class_def
     | namespace_def

namespace_def: "namespace" LOWER_NAME "{" _item* NAMESPACE_END LOWER_NAME?

class_def: "class" CLASS_NAME "{" _member* "};"

_member: include
       | constructor
       | method
       | static_method

include: INCLUDE

constructor: CLASS_NAME "(" arguments ")" ";"

method: return_type LOWER_NAME "(" arguments ")" CONST? ";"

static_method: "static" return_type _static_name "(" arguments ")" ";"

_static_name: CLASS_NAME | LOWER_NAME

arguments: [argument ("," argument)*]

argument: basis_type arg_name                    -> basis_arg
        | eigen_type PTR? arg_name               -> eigen_arg
        | CONST? qualified_class REF arg_name    -> class_ref_arg
        | qualified_class PTR arg_name           -> class_ptr_arg
        | CONST? eigen_type REF arg_name         -> eigen_ref_arg

arg_name: LOWER_NAME | CLASS_NAME

return_type: "void"                                     -> void_return
           | return_slot                                -> single_return
           | "pair" "<" return_slot "," return_slot ">" -> pair_return

return_slot: basis_type             -> basis_slot
           | qualified_class PTR?   -> class_slot
           | eigen_type             -> eigen_slot

qualified_class: (LOWER_NAME "::")* CLASS_NAME

!basis_type: "string" | "bool" | "size_t" | "int" | "double"
!eigen_type: "Vector" | "Matrix"

CONST: "const"
PTR: "*"
REF: "&"
CLASS_NAME: /[A-Z][A-Za-z0-9_]*/
LOWER_NAME: /[a-z][A-Za-z0-9_]*/
INCLUDE: /#include\s*<[^>]*>/
NAMESPACE_END: /\}\/\/\/\\namespace/

%import common.WS
%import common.C_COMMENT
%import common.CPP_COMMENT
%ignore WS
%ignore C_COMMENT
%ignore CPP_COMMENT
"""

_LARK = Lark(_GRAMMAR, parser="lalr", lexer="basic", maybe_placeholders=False)

_INCLUDE_PATH = re.compile(r'#include\s*<([^>]*)>')


def _has(items, token_type: str) -> bool:
    return any(isinstance(i, Token) and i.type == token_type for i in items)


def _values(items) -> list:
    """Drop the marker tokens (const, *, &) a production carries"""
    return [i for i in items if not (isinstance(i, Token) and i.type in ("CONST", "PTR", "REF"))]


class _ModuleBuilder(Transformer):
    """Builds immutable model values bottom-up from the parse tree"""

    def start(self, items) -> tuple:
        return _flatten(items)

    def namespace_def(self, items) -> tuple:
        name = items[0]
        trailing = items[-1]
        closing = trailing is not name and isinstance(trailing, Token) and trailing.type == "LOWER_NAME"
        if closing and trailing != name:
            raise ParseFailed(
                trailing.start_pos, str(trailing),
                reason=f"namespace '{name}' closed as '{trailing}'",
            )
        body = [i for i in items[1:] if not isinstance(i, Token)]
        return tuple(
            replace(cls, namespaces=(str(name),) + cls.namespaces)
            for cls in _flatten(body)
        )

    def class_def(self, items) -> Class:
        name = str(items[0])
        constructors, methods, static_methods, includes = [], [], [], []
        for member in items[1:]:
            if isinstance(member, Constructor):
                # Constructors are recognised by shape and always take the class name
                constructors.append(replace(member, name=name))
            elif isinstance(member, Method):
                methods.append(member)
            elif isinstance(member, StaticMethod):
                static_methods.append(member)
            else:
                includes.append(member)
        return Class(
            name=name,
            constructors=tuple(constructors),
            methods=tuple(methods),
            static_methods=tuple(static_methods),
            includes=tuple(includes),
        )

    def include(self, items) -> str:
        return _INCLUDE_PATH.match(items[0]).group(1)

    def constructor(self, items) -> Constructor:
        return Constructor(name=str(items[0]), args=items[1])

    def method(self, items) -> Method:
        return_value, name, args = items[:3]
        return Method(
            name=str(name),
            args=args,
            return_value=return_value,
            is_const=_has(items, "CONST"),
        )

    def static_method(self, items) -> StaticMethod:
        return_value, name, args = items
        return StaticMethod(name=str(name), args=args, return_value=return_value)

    def arguments(self, items) -> tuple:
        return tuple(items)

    def basis_arg(self, items) -> Argument:
        arg_type, name = items
        return Argument(type=arg_type, name=name)

    def eigen_arg(self, items) -> Argument:
        arg_type, name = _values(items)
        return Argument(type=arg_type, name=name, is_pointer=_has(items, "PTR"))

    def class_ref_arg(self, items) -> Argument:
        (namespaces, arg_type), name = _values(items)
        return Argument(
            type=arg_type,
            name=name,
            is_const=_has(items, "CONST"),
            is_reference=True,
            namespaces=namespaces,
        )

    def class_ptr_arg(self, items) -> Argument:
        (namespaces, arg_type), name = _values(items)
        return Argument(type=arg_type, name=name, is_pointer=True, namespaces=namespaces)

    def eigen_ref_arg(self, items) -> Argument:
        arg_type, name = _values(items)
        return Argument(
            type=arg_type,
            name=name,
            is_const=_has(items, "CONST"),
            is_reference=True,
        )

    def arg_name(self, items) -> str:
        return str(items[0])

    def void_return(self, items) -> ReturnValue:
        return ReturnValue()

    def single_return(self, items) -> ReturnValue:
        return ReturnValue(first=items[0])

    def pair_return(self, items) -> ReturnValue:
        first, second = items
        return ReturnValue(first=first, second=second)

    def basis_slot(self, items) -> ReturnSlot:
        return ReturnSlot(type=items[0], category=Category.BASIS)

    def class_slot(self, items) -> ReturnSlot:
        namespaces, slot_type = items[0]
        return ReturnSlot(
            type=slot_type,
            category=Category.CLASS,
            is_pointer=_has(items, "PTR"),
            namespaces=namespaces,
        )

    def eigen_slot(self, items) -> ReturnSlot:
        return ReturnSlot(type=items[0], category=Category.EIGEN)

    def qualified_class(self, items) -> tuple:
        *namespaces, name = items
        return tuple(str(n) for n in namespaces), str(name)

    def basis_type(self, items) -> str:
        return str(items[0])

    def eigen_type(self, items) -> str:
        return str(items[0])


def _flatten(items) -> tuple:
    classes = []
    for item in items:
        if isinstance(item, Class):
            classes.append(item)
        else:
            classes.extend(item)
    return tuple(classes)


class InterfaceParser:
    """Parses interface files into a Module"""

    def __init__(self, content: str, module_name: str = "", verbose: bool = False):
        self.content = content
        self.module_name = module_name
        self.verbose = verbose

    def parse(self) -> Module:
        try:
            tree = _LARK.parse(self.content)
        except UnexpectedInput as e:
            offset = self._error_offset(e)
            raise ParseFailed(offset, self.content[offset:offset + 20]) from e

        try:
            classes = _ModuleBuilder().transform(tree)
        except VisitError as e:
            if isinstance(e.orig_exc, WrapError):
                raise e.orig_exc from None
            raise

        return Module(name=self.module_name, verbose=self.verbose, classes=classes)

    def _error_offset(self, error: UnexpectedInput) -> int:
        if isinstance(error, UnexpectedEOF):
            return len(self.content)
        if isinstance(error, UnexpectedToken) and error.token.type == "$END":
            return len(self.content)
        pos = error.pos_in_stream
        if pos is None or pos < 0:
            return len(self.content)
        return pos


def load_module(interface_path, module_name: str, verbose: bool = False) -> Module:
    """Read <interface_path>/<module_name>.h and parse it"""
    interface_file = Path(interface_path) / f"{module_name}.h"
    try:
        content = interface_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CantOpenFile(interface_file) from e

    module = InterfaceParser(content, module_name, verbose).parse()
    if verbose:
        print(f"Parsed: {interface_file} ({len(module.classes)} classes)")
    return module
