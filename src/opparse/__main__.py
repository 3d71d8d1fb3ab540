"""CLI entry point: run `opparse grammar.txt` or `python -m opparse grammar.txt`."""

import logging
import sys
from pathlib import Path


def main(argv=None) -> int:
    import argparse
    from .frontend.parser import Parser
    from .grammar.loader import load_grammar
    from .shared.errors import ErrorReporter, GrammarDefinitionError, ParseError
    from .utils.config import default_grammar_path

    parser = argparse.ArgumentParser(
        prog="opparse",
        description="Parse expressions read from standard input under an operator grammar.",
    )
    parser.add_argument("grammar", nargs="?", type=Path, default=default_grammar_path(),
                        help="Path to grammar specification (default: $OPPARSE_GRAMMAR)")
    parser.add_argument("-d", "--debug", action="store_true",
                        help="Trace parser stacks on stderr")
    parser.add_argument("--report-errors", action="store_true",
                        help="Print a diagnostic for lines that fail to parse instead of skipping them")
    args = parser.parse_args(argv)

    if args.grammar is None:
        parser.error("a grammar file is required (argument or $OPPARSE_GRAMMAR)")

    if args.debug:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s: %(message)s")

    path = Path(args.grammar).resolve()
    if not path.is_file():
        sys.stderr.write(f"opparse: error: grammar file not found: {path}\n")
        return 1
    try:
        grammar = load_grammar(path)
    except GrammarDefinitionError as e:
        sys.stderr.write(f"opparse: {e}\n")
        return 1
    except OSError as e:
        sys.stderr.write(f"opparse: error: could not read grammar: {e}\n")
        return 1

    expression_parser = Parser(grammar, verbose=args.debug)
    reporter = ErrorReporter()

    print("Enter an expression to parse:")
    for line in sys.stdin:
        line = line.rstrip("\r\n")
        if line == "":
            break
        try:
            print(expression_parser.parse(line))
        except ParseError as e:
            if args.report_errors:
                reporter.report_parse_error(e, line)
                reporter.print_errors()
                reporter.clear()

    print("Goodbye!")
    return 0


if __name__ == "__main__":
    sys.exit(main())
