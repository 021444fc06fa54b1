"""MATLAB Generator - renders proxy classes and MEX glue for one class at a time"""

from .types import Argument, Class, Constructor, Method, ReturnValue, StaticMethod
from .type_mapper import TypeMapper


HEADER_COMMENT = "automatically generated by wrap"


class MatlabGenerator:
    """Generates MATLAB proxy classes, MEX sources and make fragments"""

    def __init__(self, namespace: str = "", mex_flags: str = ""):
        self.namespace = namespace
        self.mex_flags = mex_flags

    def constructor_name(self, cls: Class, ctor: Constructor) -> str:
        return f"new_{cls.qualified_name()}_{TypeMapper.signature(ctor.args)}"

    def static_method_name(self, cls: Class, method: StaticMethod) -> str:
        return f"{cls.qualified_name()}_{method.name}"

    def generate_proxy(self, cls: Class) -> str:
        """Generate the classdef file living in @<Class>/"""
        matlab_name = cls.qualified_name()
        lines = [
            f"% {HEADER_COMMENT}",
            f"classdef {matlab_name}",
            "  properties",
            "    self = 0",
            "  end",
            "  methods",
            f"    function obj = {matlab_name}(varargin)",
        ]
        for ctor in cls.constructors:
            lines.append(f"      {self._constructor_dispatch(cls, ctor)}")
        lines.extend([
            f"      if obj.self == 0, error('{matlab_name} constructor failed'); end",
            "    end",
            "    function display(obj), obj.print(''); end",
            "    function disp(obj), obj.display; end",
            "  end",
            "end",
            "",
        ])
        return "\n".join(lines)

    def _constructor_dispatch(self, cls: Class, ctor: Constructor) -> str:
        checks = [f"nargin == {len(ctor.args)}"]
        for i, arg in enumerate(ctor.args, start=1):
            checks.append(f"isa(varargin{{{i}}},'{TypeMapper.to_matlab_class(arg)}')")
        call_args = ",".join(f"varargin{{{i}}}" for i in range(1, len(ctor.args) + 1))
        return (f"if {' && '.join(checks)}, "
                f"obj.self = {self.constructor_name(cls, ctor)}({call_args}); end")

    def generate_constructor_m(self, cls: Class, ctor: Constructor) -> str:
        name = self.constructor_name(cls, ctor)
        return self._m_stub(name, [a.name for a in ctor.args])

    def generate_constructor_cpp(self, cls: Class, ctor: Constructor) -> str:
        name = self.constructor_name(cls, ctor)
        cpp_class = cls.qualified_name("::")
        lines = self._cpp_preamble(cls)
        lines.extend([
            "void mexFunction(int nargout, mxArray *out[], int nargin, const mxArray *in[])",
            "{",
            f"  checkArguments(\"{name}\",nargout,nargin,{len(ctor.args)});",
        ])
        lines.extend(self._unwrap_args(ctor.args, first_index=0))
        lines.extend([
            f"  {cpp_class}* self = new {cpp_class}({self._call_args(ctor.args)});",
            f"  out[0] = wrap_constructed(self,\"{cls.qualified_name()}\");",
            "}",
            "",
        ])
        return "\n".join(lines)

    def generate_method_m(self, cls: Class, method: Method) -> str:
        return self._m_stub(method.name, ["obj"] + [a.name for a in method.args])

    def generate_method_cpp(self, cls: Class, method: Method) -> str:
        cpp_class = cls.qualified_name("::")
        lines = self._cpp_preamble(cls)
        lines.extend([
            "void mexFunction(int nargout, mxArray *out[], int nargin, const mxArray *in[])",
            "{",
            f"  checkArguments(\"{method.name}\",nargout,nargin-1,{len(method.args)});",
            f"  boost::shared_ptr<{cpp_class}> self = "
            f"unwrap_shared_ptr< {cpp_class} >(in[0],\"{cls.qualified_name()}\");",
        ])
        lines.extend(self._unwrap_args(method.args, first_index=1))
        call = f"self->{method.name}({self._call_args(method.args)})"
        lines.extend(self._return(method.return_value, call))
        lines.extend(["}", ""])
        return "\n".join(lines)

    def generate_static_method_m(self, cls: Class, method: StaticMethod) -> str:
        name = self.static_method_name(cls, method)
        return self._m_stub(name, [a.name for a in method.args])

    def generate_static_method_cpp(self, cls: Class, method: StaticMethod) -> str:
        name = self.static_method_name(cls, method)
        lines = self._cpp_preamble(cls)
        lines.extend([
            "void mexFunction(int nargout, mxArray *out[], int nargin, const mxArray *in[])",
            "{",
            f"  checkArguments(\"{name}\",nargout,nargin,{len(method.args)});",
        ])
        lines.extend(self._unwrap_args(method.args, first_index=0))
        call = f"{cls.qualified_name('::')}::{method.name}({self._call_args(method.args)})"
        lines.extend(self._return(method.return_value, call))
        lines.extend(["}", ""])
        return "\n".join(lines)

    def make_fragment(self, cls: Class) -> str:
        """mex calls for the make script, run from the toolbox directory"""
        flags = f"{self.mex_flags} " if self.mex_flags else ""
        lines = []
        for ctor in cls.constructors:
            lines.append(f"mex {flags}{self.constructor_name(cls, ctor)}.cpp")
        for method in cls.static_methods:
            lines.append(f"mex {flags}{self.static_method_name(cls, method)}.cpp")
        lines.append(f"cd @{cls.qualified_name()}")
        for method in cls.methods:
            lines.append(f"mex {flags}{method.name}.cpp")
        lines.append("")
        return "\n".join(lines)

    def makefile_fragment(self, cls: Class) -> str:
        """One rule per MEX target plus a target named after the class"""
        class_dir = f"@{cls.qualified_name()}"
        targets = [self.constructor_name(cls, c) for c in cls.constructors]
        targets.extend(self.static_method_name(cls, m) for m in cls.static_methods)
        targets.extend(f"{class_dir}/{m.name}" for m in cls.methods)

        lines = []
        for target in targets:
            lines.append(f"{target}.$(MEXENDING): {target}.cpp")
            lines.append(f"\t$(MEX) $(mex_flags) {target}.cpp -output {target}")
        lines.append("")
        deps = " ".join(f"{target}.$(MEXENDING)" for target in targets)
        lines.append(f"{cls.qualified_name()}: {deps}".rstrip())
        lines.append("")
        lines.append("")
        return "\n".join(lines)

    def _m_stub(self, name: str, params: list[str]) -> str:
        lines = [
            f"% {HEADER_COMMENT}",
            f"function result = {name}({','.join(params)})",
            f"  error('need to compile {name}.cpp');",
            "end",
            "",
        ]
        return "\n".join(lines)

    def _cpp_preamble(self, cls: Class) -> list[str]:
        lines = [
            f"// {HEADER_COMMENT}",
            "#include <wrap/matlab.h>",
        ]
        for include in cls.includes:
            lines.append(f"#include <{include}>")
        if self.namespace:
            lines.append(f"using namespace {self.namespace};")
        lines.append("")
        return lines

    def _unwrap_args(self, args: tuple[Argument, ...], first_index: int) -> list[str]:
        return [f"  {TypeMapper.unwrap_arg(arg, first_index + i)}" for i, arg in enumerate(args)]

    def _call_args(self, args: tuple[Argument, ...]) -> str:
        return ",".join(TypeMapper.call_arg(arg) for arg in args)

    def _return(self, return_value: ReturnValue, call: str) -> list[str]:
        if return_value.is_void:
            return [f"  {call};"]
        if return_value.is_pair:
            first, second = return_value.slots
            pair_type = f"std::pair< {TypeMapper.return_cpp(first)}, {TypeMapper.return_cpp(second)} >"
            return [
                f"  {pair_type} result = {call};",
                f"  out[0] = {TypeMapper.wrap_result(first, 'result.first')};",
                f"  out[1] = {TypeMapper.wrap_result(second, 'result.second')};",
            ]
        slot = return_value.first
        return [
            f"  {TypeMapper.return_cpp(slot)} result = {call};",
            f"  out[0] = {TypeMapper.wrap_result(slot, 'result')};",
        ]
