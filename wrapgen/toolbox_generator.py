"""Toolbox Generator - lays out a MATLAB toolbox for a parsed Module"""

from pathlib import Path

from .errors import CantOpenFile
from .matlab_generator import HEADER_COMMENT, MatlabGenerator
from .types import Class, Module
from .validator import known_types, verify_class


class _AggregateFile:
    """Text file written piece by piece; I/O failures surface as CantOpenFile"""

    def __init__(self, path: Path):
        self.path = path
        try:
            self._handle = open(path, "w")
        except OSError as e:
            raise CantOpenFile(path) from e

    def write(self, text: str) -> None:
        try:
            self._handle.write(text)
        except OSError as e:
            raise CantOpenFile(self.path) from e

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc, tb):
        try:
            self._handle.close()
        except OSError as e:
            # A failure already in flight takes precedence
            if exc_type is None:
                raise CantOpenFile(self.path) from e
        return False


class ToolboxGenerator:
    """Writes proxy classes, MEX glue, the make script and the Makefile.

    Classes are processed in declaration order. Generation stops at the first
    failure; whatever was written for earlier classes stays on disk.
    """

    def __init__(self, module: Module, emitter_class=MatlabGenerator):
        # emitter_class is called as emitter_class(namespace, mex_flags)
        self.module = module
        self.emitter_class = emitter_class

    def generate(self, toolbox_path, namespace: str = "", mex_ext: str = "mexa64", mex_flags: str = ""):
        toolbox = Path(toolbox_path)
        self._mkdir(toolbox)

        emitter = self.emitter_class(namespace, mex_flags)
        valid_types = known_types(self.module)

        make_m_path = toolbox / f"make_{self.module.name}.m"
        makefile_path = toolbox / "Makefile"

        with self._open(make_m_path) as make_m, self._open(makefile_path) as makefile:
            make_m.write(self._make_script_header())
            makefile.write(self._makefile_header(mex_ext, mex_flags))

            for cls in self.module.classes:
                self._generate_class(toolbox, cls, emitter, valid_types)

                make_m.write(f"%% {cls.qualified_name()}\n")
                make_m.write("cd(toolboxpath)\n")
                make_m.write(emitter.make_fragment(cls))

                makefile.write(f"# {cls.qualified_name()}\n")
                makefile.write(emitter.makefile_fragment(cls))

            make_m.write("cd(toolboxpath)\n\necho off\n")
            makefile.write(self._makefile_clean())

    def _generate_class(self, toolbox: Path, cls: Class, emitter, valid_types) -> None:
        class_path = toolbox / f"@{cls.qualified_name()}"
        self._mkdir(class_path)
        self._write(class_path / f"{cls.qualified_name()}.m", emitter.generate_proxy(cls))

        verify_class(valid_types, cls)

        for ctor in cls.constructors:
            name = emitter.constructor_name(cls, ctor)
            self._write(toolbox / f"{name}.m", emitter.generate_constructor_m(cls, ctor))
            self._write(toolbox / f"{name}.cpp", emitter.generate_constructor_cpp(cls, ctor))

        for method in cls.static_methods:
            name = emitter.static_method_name(cls, method)
            self._write(toolbox / f"{name}.m", emitter.generate_static_method_m(cls, method))
            self._write(toolbox / f"{name}.cpp", emitter.generate_static_method_cpp(cls, method))

        for method in cls.methods:
            self._write(class_path / f"{method.name}.m", emitter.generate_method_m(cls, method))
            self._write(class_path / f"{method.name}.cpp", emitter.generate_method_cpp(cls, method))

    def _make_script_header(self) -> str:
        lines = [
            f"% {HEADER_COMMENT}",
            "echo on",
            "",
            "toolboxpath = mfilename('fullpath');",
            "delims = find(toolboxpath == '/');",
            "toolboxpath = toolboxpath(1:(delims(end)-1));",
            "clear delims",
            "addpath(toolboxpath);",
            "",
            "",
        ]
        return "\n".join(lines)

    def _makefile_header(self, mex_ext: str, mex_flags: str) -> str:
        class_names = " ".join(cls.qualified_name() for cls in self.module.classes)
        lines = [
            f"# {HEADER_COMMENT}",
            "",
            "MEX = mex",
            f"MEXENDING = {mex_ext}",
            f"mex_flags = {mex_flags}",
            "",
            f"all: {class_names}".rstrip(),
            "",
            "",
        ]
        return "\n".join(lines)

    def _makefile_clean(self) -> str:
        lines = [
            "",
            "clean:",
            "\trm -rf *.$(MEXENDING)",
        ]
        for cls in self.module.classes:
            lines.append(f"\trm -rf @{cls.qualified_name()}/*.$(MEXENDING)")
        lines.append("")
        return "\n".join(lines)

    def _open(self, path: Path) -> _AggregateFile:
        if self.module.verbose:
            print(f"Generating: {path}")
        return _AggregateFile(path)

    def _mkdir(self, path: Path) -> None:
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CantOpenFile(path) from e

    def _write(self, path: Path, content: str) -> None:
        try:
            path.write_text(content)
        except OSError as e:
            raise CantOpenFile(path) from e
        if self.module.verbose:
            print(f"Generated: {path}")
