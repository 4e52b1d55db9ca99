"""coral-emit CLI — render a JSON-serialized SAST as C++."""

from __future__ import annotations

import logging
import sys

from .backend.cpp import EmitOptions, emit_cpp
from .errors import EmitError, SerializeError
from .serialize import from_json


USAGE: str = """\
coral-emit [OPTIONS] [INPUT] [-o OUTPUT]

Render a checked Coral program (JSON, from INPUT or stdin) as C++.

Options:
  --lenient           Render reserved constructs instead of rejecting them
  --prelude           Emit #include lines before the program
  --indent N          Spaces per nesting level (default 2)
  --verbose           Log debug traces to stderr
  -o, --output FILE   Write output to FILE instead of stdout
  --help              Show this help message
"""


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    options = EmitOptions()
    verbose = False
    input_file: str | None = None
    output_file: str | None = None
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--lenient":
            options.strict = False
            i += 1
        elif arg == "--prelude":
            options.prelude = True
            i += 1
        elif arg == "--verbose":
            verbose = True
            i += 1
        elif arg == "--indent":
            if i + 1 >= len(args) or not args[i + 1].isdigit():
                print("coral-emit: --indent requires a number", file=sys.stderr)
                return 2
            options.indent = " " * int(args[i + 1])
            i += 2
        elif arg == "-o" or arg == "--output":
            if i + 1 >= len(args):
                print("coral-emit: " + arg + " requires an argument", file=sys.stderr)
                return 2
            output_file = args[i + 1]
            i += 2
        elif arg.startswith("-"):
            print("coral-emit: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif input_file is None:
            input_file = arg
            i += 1
        else:
            print("coral-emit: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG,
            format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
            stream=sys.stderr,
        )

    if input_file is None:
        raw = sys.stdin.buffer.read()
    else:
        try:
            with open(input_file, "rb") as f:
                raw = f.read()
        except OSError:
            print("coral-emit: cannot open '" + input_file + "'", file=sys.stderr)
            return 1
    if not raw.strip():
        print("coral-emit: no input provided", file=sys.stderr)
        return 2

    try:
        output = emit_cpp(from_json(raw), options)
    except SerializeError as e:
        print("coral-emit: error: " + str(e), file=sys.stderr)
        return 1
    except EmitError as e:
        print("coral-emit: error: " + e.msg, file=sys.stderr)
        return 1

    if output_file is None:
        print(output)
        return 0
    try:
        with open(output_file, "w") as f:
            f.write(output + "\n")
    except OSError:
        print("coral-emit: cannot write '" + output_file + "'", file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
