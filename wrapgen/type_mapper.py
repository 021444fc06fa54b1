"""Type mapping from interface types to C++ and MATLAB types"""

from typing import Union
from .types import Argument, Category, ReturnSlot


BASIS_TYPES = ("string", "bool", "size_t", "int", "double")
EIGEN_TYPES = ("Vector", "Matrix")


class TypeMapper:
    """Maps interface types to C++ types, MATLAB classes and MEX marshalling code"""

    # Direct C++ type mappings
    CPP_TYPES = {
        'string': 'std::string',
        'bool': 'bool',
        'size_t': 'size_t',
        'int': 'int',
        'double': 'double',
        'Vector': 'Vector',
        'Matrix': 'Matrix',
    }

    # Classes accepted by isa() when dispatching on constructor arguments
    MATLAB_CLASSES = {
        'string': 'char',
        'bool': 'logical',
        'size_t': 'numeric',
        'int': 'numeric',
        'double': 'double',
        'Vector': 'double',
        'Matrix': 'double',
    }

    @classmethod
    def is_basis(cls, idl_type: str) -> bool:
        return idl_type in BASIS_TYPES

    @classmethod
    def is_eigen(cls, idl_type: str) -> bool:
        return idl_type in EIGEN_TYPES

    @classmethod
    def is_class(cls, item: Union[Argument, ReturnSlot]) -> bool:
        """Check if an argument or return slot refers to a declared class"""
        if isinstance(item, ReturnSlot):
            return item.category is Category.CLASS
        return not cls.is_basis(item.type) and not cls.is_eigen(item.type)

    @classmethod
    def to_cpp(cls, item: Union[Argument, ReturnSlot]) -> str:
        """Convert an argument or slot type to its C++ spelling"""
        if cls.is_class(item):
            return item.qualified_type("::")
        return cls.CPP_TYPES.get(item.type, item.type)

    @classmethod
    def to_matlab_class(cls, arg: Argument) -> str:
        """MATLAB class name for isa() checks"""
        if cls.is_class(arg):
            return arg.qualified_type("_")
        return cls.MATLAB_CLASSES[arg.type]

    @classmethod
    def unwrap_arg(cls, arg: Argument, index: int) -> str:
        """C++ statement declaring a local for an argument taken from in[index]"""
        source = f"in[{index}]"
        cpp_type = cls.to_cpp(arg)
        if cls.is_class(arg):
            matlab_name = arg.qualified_type("_")
            if arg.is_pointer:
                return (f"{cpp_type}* {arg.name} = "
                        f"unwrap_shared_ptr< {cpp_type} >({source}, \"{matlab_name}\").get();")
            const = "const " if arg.is_const else ""
            return (f"{const}{cpp_type}& {arg.name} = "
                    f"*unwrap_shared_ptr< {cpp_type} >({source}, \"{matlab_name}\");")
        # Containers passed by reference or pointer are copied into a local
        return f"{cpp_type} {arg.name} = unwrap< {cpp_type} >({source});"

    @classmethod
    def call_arg(cls, arg: Argument) -> str:
        """Expression passing the unwrapped local to the C++ call"""
        if arg.is_pointer and cls.is_eigen(arg.type):
            return f"&{arg.name}"
        return arg.name

    @classmethod
    def return_cpp(cls, slot: ReturnSlot) -> str:
        """C++ type a call returns for one slot"""
        cpp_type = cls.to_cpp(slot)
        if slot.is_pointer:
            return f"{cpp_type}*"
        return cpp_type

    @classmethod
    def wrap_result(cls, slot: ReturnSlot, expr: str) -> str:
        """Expression turning a C++ value into an mxArray*"""
        if slot.category is Category.CLASS:
            cpp_type = cls.to_cpp(slot)
            matlab_name = slot.qualified_type("_")
            if slot.is_pointer:
                return f"wrap_shared_ptr(boost::shared_ptr< {cpp_type} >({expr}),\"{matlab_name}\")"
            return f"wrap_shared_ptr(boost::make_shared< {cpp_type} >({expr}),\"{matlab_name}\")"
        return f"wrap< {cls.to_cpp(slot)} >({expr})"

    @classmethod
    def signature(cls, args) -> str:
        """Short mangling suffix: first letter of each argument type"""
        return "".join(arg.type[0] for arg in args)
