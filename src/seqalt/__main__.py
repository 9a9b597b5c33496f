## Copyright © 2025, Alex J. Champandard.  Licensed under AGPLv3; see LICENSE! ⚘
#
# seqalt — A tiny bracketed expression language, folded left-to-right with no precedence.
#

import re
import sys
import time
import traceback
from pathlib import Path
from dataclasses import dataclass

import click

from .errors import SeqaltError, SeqaltSyntaxError, SeqaltIncompleteParse, UnboundNameError, TypeMismatchError
from .parser import format_parse_error_context
from .formatting import write_without_ansi, format_result

from . import api


@dataclass(frozen=True)
class RuntimeConfig:
    verbose: int
    ignore: bool
    stats: bool
    plain: bool


@dataclass
class ExecutionItem:
    source: str
    filename: str


class SeqaltRunner:
    def __init__(self, config: RuntimeConfig):
        self.verbose = config.verbose
        self.ignore = config.ignore
        self.stats_enabled = config.stats
        self.plain = config.plain

        if self.plain:
            writer = write_without_ansi(sys.stdout.write)
            sys.stdout.write, sys.stderr.write = writer, writer

        self.runtime = api._RUNTIME
        self.total_stats = {'steps': 0, 'calls': 0, 'start': time.time()} if self.stats_enabled else None
        self.failure = False
        self.executed_items = 0

    def _maybe_fatal_error(self, message: str, detail: str, exc_type: str = None, context: str = '', is_repl: bool = False) -> None:
        header = detail if not exc_type else f"{detail} (Exception: \033[33m{exc_type}\033[0m)"
        print(f'\033[30;43m {message} \033[0m {header}\n{context}', file=sys.stderr)
        self.failure = True
        if not is_repl and not self.ignore: sys.exit(1)

    def _handle_exception(self, exc, filename: str, source: str, is_repl: bool = False) -> bool:
        """Report the error; returns True when the REPL should keep reading more input instead."""
        if isinstance(exc, SeqaltError):
            context = format_parse_error_context(exc.line, exc.column, exc.token, source, filename)
            context += f"\n\033[90m{str(exc)}\033[0m\n"
        if isinstance(exc, SeqaltSyntaxError):
            if is_repl and isinstance(exc, SeqaltIncompleteParse): return True
            self._maybe_fatal_error("SYNTAX ERROR.", f"Parsing `\033[97m{filename}\033[0m` caused a problem!", type(exc).__name__, context, is_repl)
        elif isinstance(exc, UnboundNameError):
            detail = f"Name `\033[1;97m{exc.token}\033[0m` from `\033[97m{filename}\033[0m` is not bound in any scope!"
            self._maybe_fatal_error("NAME ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, TypeMismatchError):
            detail = f"Operation `\033[1;97m{exc.token}\033[0m` received operands it cannot handle."
            self._maybe_fatal_error("TYPE ERROR.", detail, type(exc).__name__, context, is_repl)
        elif isinstance(exc, RecursionError):
            self._maybe_fatal_error("RUNTIME ERROR.", "Recursion went too deep while evaluating!", type(exc).__name__, '', is_repl)
        else:
            print(f'\033[30;43m RUNTIME ERROR. \033[0m Evaluating `\033[97m{filename}\033[0m` failed! (Exception: \033[33m{type(exc).__name__}\033[0m)', file=sys.stderr)
            traceback.print_exc()
            self.failure = True
            if not is_repl and not self.ignore: sys.exit(1)
        return False

    def execute_items(self, items: list[ExecutionItem]) -> None:
        for item in items:
            self._execute_script(item.source, item.filename)

    def _execute_script(self, source: str, filename: str, is_repl: bool = False, print_result: bool = False) -> None:
        try:
            result = self.runtime.evaluate(source, verbosity=self.verbose, stats=self.total_stats)
            if print_result and result is not None:
                print(format_result(result, width=72))
        except Exception as exc:
            self._handle_exception(exc, filename, source, is_repl=is_repl)
        else:
            self.executed_items += 1

    def repl(self) -> None:
        if sys.platform != "win32": import readline

        print('seqalt - Left-to-right expression language REPL; type Ctrl+C to exit.')
        source = ""

        while True:
            try:
                prompt = "\033[36m<<< \033[0m" if not source.strip() else "\033[36m... \033[0m"
                line = input(prompt)
                if len(line.strip()) == 0: continue
                if line.strip() in ('quit', 'exit'): break
                source += line + "\n"

                try:
                    result = self.runtime.evaluate(source, verbosity=self.verbose)
                    if result is not None: print("\033[90m>>>\033[0m", format_result(result, width=72))
                    source = ""
                except Exception as exc:
                    if not self._handle_exception(exc, '<REPL>', source, is_repl=True):
                        source = ""

            except (KeyboardInterrupt, EOFError):
                print(""); break

    def finalize(self) -> int:
        if self.total_stats and self.executed_items > 0:
            elapsed_time = time.time() - self.total_stats['start']
            print(f"\n\033[97m\033[48;5;30m STATISTICS. \033[0m")
            print(f"step\t\033[97m{self.total_stats['steps']:,}\033[0m")
            print(f"call\t\033[97m{self.total_stats['calls']:,}\033[0m")
            print(f"time\t\033[97m{elapsed_time:.3f}s\033[0m")
        return 1 if self.failure else 0


def _source_path(arg: str) -> Path:
    path = Path(arg)
    if not path.exists():
        raise click.BadParameter(f"File `{arg}` not found.")
    if path.suffix != '.seq':
        raise click.BadParameter(f"Expected `.seq` source file, got `{arg}`.")
    return path


def _parse_dev_tokens(tokens: list[str]) -> list[tuple[str, Path | str | None]]:
    """Turn `-c CODE`, `-r` and `.seq` paths into an ordered list of (action, payload)."""
    actions: list[tuple[str, Path | str | None]] = []
    remaining = iter(tokens)
    for token in remaining:
        if token == '--':
            continue
        if token in ('-c', '--command'):
            if (code := next(remaining, None)) is None:
                raise click.BadParameter("Missing inline code after -c/--command option.")
            actions.append(('command', code))
        elif token.startswith(('-c=', '--command=')):
            if not (code := token.split('=', 1)[1]):
                raise click.BadParameter("Empty code supplied to command option.")
            actions.append(('command', code))
        elif token in ('-r', '--repl'):
            actions.append(('repl', None))
        elif token.startswith('-'):
            raise click.BadParameter(f"Unknown option `{token}`.")
        else:
            actions.append(('file', _source_path(token)))
    return actions


@click.group(invoke_without_command=True, context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.option('--verbose', '-v', default=0, count=True, help='Trace every fold step while evaluating.')
@click.option('--ignore', '-i', is_flag=True, help='Ignore errors and continue executing.')
@click.option('--stats', is_flag=True, help='Display execution statistics (fold steps, closure calls).')
@click.option('--plain', '-p', is_flag=True, help='Strip ANSI color codes and redirect stderr to stdout.')
@click.pass_context
def cli(ctx: click.Context, verbose: int, ignore: bool, stats: bool, plain: bool) -> None:
    ctx.ensure_object(dict)
    ctx.obj['config'] = RuntimeConfig(verbose=verbose, ignore=ignore, stats=stats, plain=plain)


@cli.command('run-file')
@click.argument('script', type=click.File('r', encoding='utf-8'))
@click.pass_context
def run_file(ctx: click.Context, script) -> None:
    runner = SeqaltRunner(ctx.obj['config'])
    runner.execute_items((ExecutionItem(script.read(), script.name or '<STDIN>'),))
    ctx.exit(runner.finalize())


@cli.command('run-dev', context_settings={'ignore_unknown_options': True, 'allow_extra_args': True})
@click.argument('tokens', nargs=-1)
@click.pass_context
def run_dev(ctx: click.Context, tokens: tuple[str, ...]) -> None:
    runner = SeqaltRunner(ctx.obj['config'])
    actions = _parse_dev_tokens(list(tokens))

    command_index = 1
    for action, payload in actions:
        if action == 'file':
            runner.execute_items((ExecutionItem(payload.read_text(encoding='utf-8'), str(payload)),))
        elif action == 'command':
            runner._execute_script(payload, f'<INPUT_{command_index}>', is_repl=False, print_result=True)
            command_index += 1
        else:
            runner.repl()

    if not actions:
        runner.repl()
    ctx.exit(runner.finalize())


@cli.command('run-repl')
@click.pass_context
def run_repl(ctx: click.Context) -> None:
    runner = SeqaltRunner(ctx.obj['config'])
    runner.repl()
    ctx.exit(runner.finalize())


def _route(args: list[str]) -> tuple[str, list[str]]:
    """Pick the subcommand for a plain `seqalt ...` invocation."""
    match args:
        case []:
            return ('run-repl', []) if sys.stdin.isatty() else ('run-file', ['-'])
        case ['-']:
            return 'run-file', ['-']
        case ['-r' | '--repl']:
            return 'run-repl', []
        case [path] if path.endswith('.seq') and Path(path).exists():
            return 'run-file', [path]
    return 'run-dev', args


def _is_global_option(arg: str) -> bool:
    return arg in ('--ignore', '-i', '--stats', '--plain', '-p', '--verbose') or re.fullmatch(r'-v+', arg) is not None


def main(argv: list[str] | None = None) -> None:
    args = list(sys.argv[1:] if argv is None else argv)
    options = [a for a in args if _is_global_option(a)]
    command, tail = _route([a for a in args if not _is_global_option(a)])
    cli.main(args=[*options, command, *tail], prog_name='seqalt')


if __name__ == "__main__":
    main()
