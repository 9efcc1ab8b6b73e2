import argparse
import logging
from pathlib import Path
from .lexer import Lexer
from .parser import Parser
from .codegen_rust import CodeGenRust
from .config import Settings
from .errors import NexaError
from runtime.rustc import RustcToolchain, ToolchainError
import sys


def main(argv=None):
    ap = argparse.ArgumentParser(description="Nexa to Rust compiler")
    ap.add_argument("source", type=Path, nargs="?", help="Source .nexa file (omit for the REPL)")
    ap.add_argument("-o", "--out", type=Path, default=Path("build/out.rs"), help="Output .rs file")
    ap.add_argument("--emit", action="store_true", help="Print the generated Rust instead of writing it")
    ap.add_argument("--run", action="store_true", help="Compile the generated Rust with rustc and run it")
    ap.add_argument("--tokens", action="store_true", help="Dump the token stream")
    ap.add_argument("--ast", action="store_true", help="Dump the parsed statements")
    ap.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    args = ap.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    settings = Settings.from_env()
    toolchain = RustcToolchain(settings.rustc, timeout=settings.run_timeout)

    if args.source is None:
        from ide.repl import Repl
        Repl(toolchain=toolchain).loop()
        return 0

    src_text = args.source.read_text(encoding="utf-8")

    try:
        tokens = Lexer(src_text).tokenize()
        if args.tokens:
            for tok in tokens:
                print(repr(tok))
        program = Parser(tokens).parse()
        if args.ast:
            for st in program.statements:
                print(st)
        code = CodeGenRust().generate(program)
    except NexaError as e:
        print(f"{args.source}: {e.describe()}", file=sys.stderr)
        return 1

    if args.run:
        try:
            result = toolchain.run(code)
        except ToolchainError as e:
            print(str(e), file=sys.stderr)
            return 1
        print(result.stdout, end="")
        return 0

    if args.emit:
        print(code, end="")
        return 0

    args.out.parent.mkdir(parents=True, exist_ok=True)
    args.out.write_text(code, encoding="utf-8")
    print(f"Wrote {args.out}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
