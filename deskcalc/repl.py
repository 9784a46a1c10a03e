import argparse
import logging
import sys
from typing import Optional, TextIO

from deskcalc.config import DEFAULT_PRECISION, DIALECTS, ReplConfig
from deskcalc.errors import CalcError
from deskcalc.evaluator import Evaluator
from deskcalc.tokenizer import TokenKind

logger = logging.getLogger(__name__)


def format_result(value: float, precision: int = DEFAULT_PRECISION) -> str:
    return f"{value:.{precision}g}"


def calculate(evaluator: Evaluator, out: TextIO, err: TextIO, config: ReplConfig) -> None:
    """Read-eval-print loop; returns on quit or end of input"""
    ts = evaluator.ts
    while True:
        if config.show_prompt:
            out.write(config.prompt)
            out.flush()
        try:
            t = ts.get()
            while t.kind is TokenKind.PRINT:
                t = ts.get()
            if t.kind is TokenKind.QUIT:
                return
            ts.putback(t)
            print(format_result(evaluator.statement(), config.precision), file=out)
        except CalcError as e:
            logger.debug(f"Statement failed: {e.errmsg}")
            print(f"error: {e}", file=err)
            evaluator.recover()


def main(argv: Optional[list[str]] = None) -> int:
    arg_parser = argparse.ArgumentParser(prog="deskcalc", description="Interactive desk calculator")
    arg_parser.add_argument(
        "file",
        nargs="?",
        type=argparse.FileType("r"),
        default=sys.stdin,
        help="read statements from this file instead of standard input",
    )
    arg_parser.add_argument("--dialect", choices=sorted(DIALECTS), default="full")
    arg_parser.add_argument(
        "--precision",
        type=int,
        default=DEFAULT_PRECISION,
        help="significant digits in printed results (default: %(default)s)",
    )
    arg_parser.add_argument("--no-prompt", action="store_true", help="do not print the '> ' prompt")
    arg_parser.add_argument("-v", "--verbose", action="store_true", help="log debug messages to stderr")
    args = arg_parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = ReplConfig(
        precision=args.precision,
        dialect=DIALECTS[args.dialect],
        show_prompt=not args.no_prompt,
    )
    evaluator = Evaluator.from_source(args.file, dialect=config.dialect)
    logger.debug(f"Starting session with {len(evaluator.symbols)} predefined constants, dialect {args.dialect!r}")
    calculate(evaluator, out=sys.stdout, err=sys.stderr, config=config)
    return 0


if __name__ == "__main__":
    sys.exit(main())
