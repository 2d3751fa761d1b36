"""Read-eval-print loop for the Monkey interpreter. Uses cmd as backend."""

import cmd
import logging
import sys
import threading
from typing import Any, Callable, TextIO, TypeVar

from termcolor import colored

from eval import evaluate
from monkey_object import Environment, Error, Object
from parser import parse_program

logger = logging.getLogger(__name__)
logger.addHandler(logging.NullHandler())

T = TypeVar("T")

# Each Monkey call costs roughly ten Python frames
RECURSION_LIMIT = 50_000
STACK_SIZE = 512 * 1024 * 1024


def run_with_deep_stack(fn: Callable[[str], T], arg: str) -> T:
    """Call fn(arg) on a worker thread with a large stack and recursion limit.

    Exceptions raised by fn are re-raised in the calling thread.
    """
    outcome: dict[str, Any] = {}

    def target() -> None:
        try:
            outcome["value"] = fn(arg)
        except BaseException as exc:
            outcome["error"] = exc

    old_limit = sys.getrecursionlimit()
    sys.setrecursionlimit(max(old_limit, RECURSION_LIMIT))
    old_stack = threading.stack_size(STACK_SIZE)
    try:
        worker = threading.Thread(target=target, name="monkey-eval", daemon=True)
        worker.start()
    finally:
        threading.stack_size(old_stack)
    try:
        worker.join()
    finally:
        sys.setrecursionlimit(old_limit)

    if "error" in outcome:
        raise outcome["error"]
    return outcome["value"]


class ErrorHandler:
    """Context manager reporting host-level failures without ending the session."""

    def __init__(self, session: "Session") -> None:
        self.session = session

    def __enter__(self) -> "ErrorHandler":
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> bool:
        if exc_type is RecursionError:
            self.session.report_error("maximum recursion depth exceeded")
            return True
        if exc_type is KeyboardInterrupt:
            self.session.report_error("keyboard interrupt")
            return True
        return False


class Session:
    """Runs units of source text against one persistent top-level environment."""

    ERROR = "red"

    def __init__(self, out: TextIO | None = None, color: bool = True) -> None:
        self.out = out if out is not None else sys.stdout
        self.color = color
        self.env = Environment()
        self.had_error = False

    def paint(self, text: str, attrs: list[str] | None = None) -> str:
        if not self.color:
            return text
        return colored(text, Session.ERROR, attrs=attrs, force_color=True)

    def report_error(self, message: str) -> None:
        self.had_error = True
        print(self.paint("error: ", attrs=["bold"]) + message, file=self.out)

    def print_parser_errors(self, errors: list[str]) -> None:
        self.had_error = True
        print(self.paint("parser errors:", attrs=["bold"]), file=self.out)
        for msg in errors:
            print(f"\t{msg}", file=self.out)

    def run(self, text: str) -> Object | None:
        """Parse and evaluate text, printing parser errors or the resulting value.

        Returns the evaluated object, or None if nothing was evaluated or the
        input produced no value.
        """
        self.had_error = False
        result: Object | None = None
        with ErrorHandler(self):
            result = run_with_deep_stack(self.execute, text)
        return result

    def execute(self, text: str) -> Object | None:
        program, errors = parse_program(text)
        if errors:
            self.print_parser_errors(errors)
            return None

        result = evaluate(program, self.env)
        if isinstance(result, Error):
            self.had_error = True
            print(self.paint(result.inspect()), file=self.out)
        elif result is not None:
            print(result.inspect(), file=self.out)
        return result


class Shell(cmd.Cmd):
    """Monkey interpreter shell."""
    intro = "Feel free to type in commands\nType 'help' for more information."
    prompt = ">> "
    commands = ("exit", "help", "EOF")

    def __init__(self, sess: Session, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self.sess = sess

    def onecmd(self, line: str) -> bool:
        """Dispatches a shell command only when the whole line is its name.

        exit, help and EOF are also valid Monkey identifiers, so anything
        longer (e.g. 'exit + 1') is evaluated as Monkey input.
        """
        stripped = line.strip()
        if not stripped:
            return self.emptyline()
        if stripped in self.commands:
            return super().onecmd(stripped)
        self.default(line)
        return False

    def default(self, line: str) -> None:
        """Evaluates arbitrary Monkey input."""
        logger.debug("input: %r", line)
        self.sess.run(line)

    def do_help(self, arg: str) -> None:
        """Doesnt return docs, but rather a short intro."""
        print("Welcome to the Monkey interpreter!\n\n"
              "Try 'let add = fn(a, b) { a + b };' and then 'add(1, 2)'.\n"
              "Bindings persist between inputs. Builtins: len, puts.\n"
              "Type 'exit' or press Ctrl-D to leave.", file=self.sess.out)

    def emptyline(self) -> bool:
        """Do not repeat previous command on empty line."""
        return False

    def do_EOF(self, arg: str) -> bool:
        """Exits interpreter."""
        print(file=self.sess.out)
        return self.do_exit(arg)

    def do_exit(self, arg: str) -> bool:
        """Exits interpreter."""
        return True
