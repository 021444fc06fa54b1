#!/usr/bin/env python3
"""
MATLAB Toolbox Generator

Parses an interface file <interface_path>/<module_name>.h and generates:
  1. A MATLAB proxy class per declared class
  2. MEX glue for every constructor, method and static method
  3. make_<module_name>.m and a Makefile to build the toolbox

Usage:
    python generate_toolbox.py interfaces geometry toolbox/
    python generate_toolbox.py interfaces geometry toolbox/ --namespace gtsam --mex-flags "-O"
    python generate_toolbox.py interfaces geometry --check
"""

import argparse
import sys
import time
from pathlib import Path

# Add parent directory to path so wrapgen package can be found
sys.path.insert(0, str(Path(__file__).parent.parent))

from wrapgen import ToolboxGenerator, WrapError, load_module, verify_module


def main(argv=None):
    start_time = time.perf_counter()

    parser = argparse.ArgumentParser(description="Generate a MATLAB toolbox from an interface file")
    parser.add_argument("interface_path", help="Directory containing <module_name>.h")
    parser.add_argument("module_name", help="Name of the module to wrap")
    parser.add_argument("toolbox_path", nargs="?", default="", help="Output directory for the toolbox")
    parser.add_argument("--namespace", "-n", default="", help="C++ namespace used by the MEX glue")
    parser.add_argument("--mex-ext", default="mexa64", help="MEX file extension")
    parser.add_argument("--mex-flags", default="", help="Flags passed to mex")
    parser.add_argument("--check", action="store_true", help="Only parse and validate the interface")
    parser.add_argument("--verbose", "-v", action="store_true", help="Report every file written")
    args = parser.parse_args(argv)

    if not args.check and not args.toolbox_path:
        parser.error("toolbox_path is required unless --check is given")

    try:
        module = load_module(args.interface_path, args.module_name, args.verbose)
        if args.check:
            verify_module(module)
            print(f"{args.module_name}: {len(module.classes)} classes OK")
        else:
            ToolboxGenerator(module).generate(
                args.toolbox_path, args.namespace, args.mex_ext, args.mex_flags,
            )
    except WrapError as e:
        print(f"error: {e}", file=sys.stderr)
        return 1

    elapsed = time.perf_counter() - start_time
    print(f"Generation completed in {elapsed*1000:.2f} ms")
    return 0


if __name__ == "__main__":
    sys.exit(main())
