"""CLI entry point for the semantic interpreter.

Usage:
    python -m seminterp [-v|-vv|-vvv] <program_file>
    python -m seminterp --tokens <program_file>
    python -m seminterp --tree <program_file>

Options:
  -v            Increase debug verbosity (can be repeated)
  --tokens      Print the token stream instead of running the program
  --tree        Print the semantic tree outline instead of running the program

Debug information is written to `debug.txt` in the current directory when
verbosity is greater than zero.
"""

import argparse
import sys
from pathlib import Path

from .errors import SeminterpError
from .interpreter import Interpreter
from .lexer import tokenize
from .parser import parse_tokens


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Semantic pseudo-language interpreter")
    parser.add_argument('-v', action='count', default=0, help='increase debug verbosity (can be repeated)')
    group = parser.add_mutually_exclusive_group()
    group.add_argument('--tokens', action='store_true', help='print the token stream and exit')
    group.add_argument('--tree', action='store_true', help='print the semantic tree outline and exit')
    parser.add_argument('program', help='program file to execute')
    args = parser.parse_args(argv)

    program_file = Path(args.program)
    if not program_file.exists():
        print(f"Error: file {program_file} not found", file=sys.stderr)
        sys.exit(1)
    with open(program_file, 'r', encoding='utf-8') as f:
        source = f.read()

    try:
        tokens = tokenize(source)
        if args.tokens:
            for token in tokens:
                print(f"{token.line}:{token.column} {token.kind.name} {token.text}")
            return
        tree = parse_tokens(tokens)
    except (SeminterpError, RecursionError) as e:
        print(f"Parse error: {e}", file=sys.stderr)
        sys.exit(1)

    if args.tree:
        for line in tree.outline():
            print(line)
        return

    interpreter = Interpreter(debug_level=args.v)
    try:
        interpreter.run(tree)
    except (SeminterpError, RecursionError) as e:
        print(f"Runtime error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == '__main__':
    main()
