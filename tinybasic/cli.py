import argparse
import logging
import sys

from .errors import BasicError
from .program import MAX_LINES
from .runtime import MAX_FOR_DEPTH, BasicRuntime

log = logging.getLogger(__name__)

BANNER = "TinyBASIC - commands: LOAD SAVE LIST RUN NEW QUIT"
PROMPT = "BASIC> "


class Console:
    """The interactive command loop around a BasicRuntime."""

    def __init__(self, runtime, stdin=None):
        self.runtime = runtime
        self.stdin = stdin if stdin is not None else sys.stdin

    @property
    def out(self):
        return self.runtime.out

    @property
    def err(self):
        return self.runtime.err

    def loop(self):
        print(BANNER, file=self.out)
        while True:
            self.out.write(PROMPT)
            self.out.flush()
            line = self.stdin.readline()
            if not line:
                break
            if not self.handle(line):
                break

    def handle(self, line):
        """Run one command line. Returns False when the session should end."""
        p = line.strip()
        if not p:
            return True
        # program line if starts with digit
        if p[0].isdigit():
            try:
                self.runtime.enter_line(p)
            except BasicError as e:
                print(e, file=self.err)
            return True

        cmd, _, arg = p.partition(' ')
        cmd = cmd.upper()
        arg = arg.strip()
        if cmd == 'LOAD':
            if not arg:
                print("Usage: LOAD filename", file=self.err)
            else:
                self.load(arg)
        elif cmd == 'SAVE':
            if not arg:
                print("Usage: SAVE filename", file=self.err)
            else:
                try:
                    self.runtime.save_file(arg)
                except OSError as e:
                    log.debug("save failed: %s", e)
                    print(f"Failed to save {arg}", file=self.err)
        elif cmd == 'LIST':
            self.runtime.list_program()
        elif cmd == 'RUN':
            self.runtime.run()
        elif cmd == 'NEW':
            self.runtime.new()
        elif cmd in ('QUIT', 'EXIT'):
            return False
        else:
            print(f"Unknown command: {cmd}", file=self.err)
        return True

    def load(self, path):
        try:
            self.runtime.load_file(path)
        except (OSError, BasicError) as e:
            log.debug("load of %s failed: %s", path, e)
            print(f"Failed to load {path}", file=self.err)
            return False
        return True


def build_arg_parser():
    parser = argparse.ArgumentParser(description='Tiny line-numbered BASIC interpreter')
    parser.add_argument('program', nargs='?', help='Program file to load and run')
    parser.add_argument('--max-lines', type=int, default=MAX_LINES,
                        help='Maximum number of program lines (default: %(default)s)')
    parser.add_argument('--max-for-depth', type=int, default=MAX_FOR_DEPTH,
                        help='Maximum FOR nesting depth (default: %(default)s)')
    parser.add_argument('-v', '--verbose', action='store_true', help='Debug logging')
    return parser


def main(argv=None):
    args = build_arg_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format='%(name)s: %(levelname)s: %(message)s')

    runtime = BasicRuntime(max_lines=args.max_lines, max_for_depth=args.max_for_depth)
    console = Console(runtime)
    if args.program:
        if not console.load(args.program):
            return 1
        result = runtime.run()
        return 0 if result.ok else 1
    console.loop()
    return 0


if __name__ == "__main__":
    sys.exit(main())
