"""mathsh CLI - interactive session and file runner."""

from __future__ import annotations

import json
import logging
import sys

from . import parse
from .ast import Expr, to_dict
from .diagnostics import MathshError
from .runtime import Environment, EvalFault, evaluate

logger = logging.getLogger(__name__)

PROMPT: str = "math> "

USAGE: str = """\
mathsh [OPTIONS] [FILE]

Evaluate mathsh expressions. Without FILE, start an interactive session.

Options:
  --ast          Print the parsed expressions as JSON instead of evaluating
  -v, --verbose  Log debug output to stderr
  -h, --help     Show this help message
"""


def _report(err: MathshError, source: str) -> None:
    kind = "runtime error" if isinstance(err, EvalFault) else "parse error"
    print("mathsh: " + kind + ": " + err.render(source), file=sys.stderr)


def _dump(exprs: list[Expr]) -> None:
    print(json.dumps([to_dict(e) for e in exprs], indent=2))


def run_file(filepath: str, dump_ast: bool = False) -> int:
    try:
        with open(filepath, "rb") as f:
            raw = f.read()
    except FileNotFoundError:
        print("mathsh: " + filepath + ": No such file or directory", file=sys.stderr)
        return 1
    except OSError as e:
        print("mathsh: " + filepath + ": " + str(e), file=sys.stderr)
        return 1
    try:
        source = raw.decode("utf-8")
    except UnicodeDecodeError:
        print("mathsh: " + filepath + ": invalid utf-8", file=sys.stderr)
        return 1
    logger.debug("read %d bytes from %s", len(raw), filepath)

    try:
        exprs = parse(source)
        logger.debug("parsed %d top-level expressions", len(exprs))
        if dump_ast:
            _dump(exprs)
            return 0
        env = Environment()
        for expr in exprs:
            evaluate(expr, env)
    except MathshError as e:
        _report(e, source)
        return 1
    except RecursionError:
        print("mathsh: error: expression nested too deeply", file=sys.stderr)
        return 1
    return 0


def _interact(env: Environment, line: str, dump_ast: bool) -> None:
    """Parse one line of input and print the value of each expression in it."""
    try:
        exprs = parse(line)
        if dump_ast:
            _dump(exprs)
            return
        for expr in exprs:
            print(evaluate(expr, env).to_string())
    except MathshError as e:
        if isinstance(e, EvalFault):
            logger.debug("fault in session: %s", e.msg)
        _report(e, line)
    except RecursionError:
        print("mathsh: error: expression nested too deeply", file=sys.stderr)


def repl(dump_ast: bool = False) -> int:
    env = Environment()
    while True:
        print(PROMPT, end="", flush=True)
        try:
            line = sys.stdin.readline()
            if line == "":
                print()
                return 0
            if line.strip() == "":
                continue
            _interact(env, line, dump_ast)
        except KeyboardInterrupt:
            print()
            return 130


def main(argv: list[str] | None = None) -> int:
    args = argv if argv is not None else sys.argv[1:]
    filepath: str = ""
    dump_ast = False
    verbose = False
    i = 0
    while i < len(args):
        arg = args[i]
        if arg == "--help" or arg == "-h":
            print(USAGE, end="")
            return 0
        elif arg == "--ast":
            dump_ast = True
            i += 1
        elif arg == "--verbose" or arg == "-v":
            verbose = True
            i += 1
        elif arg.startswith("-"):
            print("mathsh: unknown flag '" + arg + "'", file=sys.stderr)
            return 2
        elif filepath == "":
            filepath = arg
            i += 1
        else:
            print("mathsh: unexpected argument '" + arg + "'", file=sys.stderr)
            return 2

    if verbose:
        logging.basicConfig(
            level=logging.DEBUG, stream=sys.stderr, format="%(name)s: %(message)s"
        )

    if filepath == "":
        return repl(dump_ast)
    return run_file(filepath, dump_ast)


if __name__ == "__main__":
    sys.exit(main())
