import time
import logging
from types import TracebackType
from typing import (Self, Type, Optional, Callable, Awaitable, ParamSpec,
                    TypeVar, Union, overload)
from functools import wraps
from enum import StrEnum
from inspect import iscoroutinefunction

from rich.console import Console
from rich.text import Text

from .units import units_of, unit_of, to_unit, to_units

__all__ = ['Benchmark', 'Status', 'Emphasis', 'start', 'timed']
logger = logging.getLogger('time_elapsed')

default_console = Console()

P = ParamSpec(name='P')
R = TypeVar(name='R')


def _noop(_: str) -> None:
    """No-op function for verbose=False mode."""
    return None


class Status(StrEnum):
    """Enum object indicating the status of a benchmark."""
    RUNNING = 'running'
    ENDED = 'ended'
    FAILED = 'failed'


class Emphasis(StrEnum):
    """Rich styles applied to the parts of each printed line."""
    NAME = 'bold green'
    MESSAGE = 'bold'
    VALUE = 'bold magenta'


class Benchmark:
    """A named benchmark with a start timestamp and a movable checkpoint.

    `log()` reports the time since the last checkpoint, `log_overall()` the
    time since the start, and `end()` prints the total and closes the
    benchmark. Use `start()` to create one.

    Example:
        bench = start("load")
        rows = read_rows()
        bench.log("read rows").checkpoint()
        parse(rows)
        bench.log("parsed")
        bench.end()
    """
    def __init__(self, name: object, console: Optional[Console] = None,
                 verbose: bool = False,
                 log_func: Callable[[str], None] = logger.info) -> None:
        self._name: str = str(name)
        self._console: Console = console if console is not None else default_console
        self._verbose: bool = verbose
        self._log_func: Callable[[str], None] = log_func if verbose else _noop
        self._total_ns: Optional[int] = None
        self._status: Status = Status.RUNNING
        self._emit(Text(f"running {self._name}..."))
        self._start_instant: int = time.perf_counter_ns()
        self._last_checkpoint: int = time.perf_counter_ns()

    @property
    def name(self) -> str:
        return self._name

    @property
    def status(self) -> Status:
        return self._status

    @property
    def start_instant(self) -> int:
        return self._start_instant

    @property
    def last_checkpoint(self) -> int:
        return self._last_checkpoint

    @property
    def elapsed_ns(self) -> int:
        """Nanoseconds since the last checkpoint."""
        self._ensure_running()
        return time.perf_counter_ns() - self._last_checkpoint

    @property
    def overall_ns(self) -> int:
        """Nanoseconds since the start. Frozen once the benchmark has ended."""
        if self._total_ns is not None:
            return self._total_ns
        return time.perf_counter_ns() - self._start_instant

    def checkpoint(self) -> int:
        """Move the checkpoint to now and return it in nanoseconds.

        Raises:
            RuntimeError: If the benchmark has already ended
        """
        self._ensure_running()
        self._last_checkpoint = time.perf_counter_ns()
        return self._last_checkpoint

    def log(self, message: object) -> Self:
        """Print a message with the time elapsed since the last checkpoint.

        The checkpoint itself is left untouched; call `checkpoint()` to move it.

        Raises:
            RuntimeError: If the benchmark has already ended
        """
        self._ensure_running()
        self._print_message(str(message), time.perf_counter_ns() - self._last_checkpoint)
        return self

    def log_overall(self, message: object) -> Self:
        """Print a message with the time elapsed since the start, ignoring checkpoints.

        Raises:
            RuntimeError: If the benchmark has already ended
        """
        self._ensure_running()
        self._print_message(str(message), time.perf_counter_ns() - self._start_instant)
        return self

    def end(self) -> None:
        """Print the total elapsed time and close the benchmark.

        Raises:
            RuntimeError: If the benchmark has already ended
        """
        self._ensure_running()
        nanos = time.perf_counter_ns() - self._start_instant
        self._total_ns = nanos
        self._status = Status.ENDED
        coarse, fine = units_of(nanos)
        coarse_value, fine_value = to_units(nanos, coarse)
        logger.debug("%s finished: %d ns", self._name, nanos)
        self._emit(Text.assemble(
            (f"{self._name} finished", Emphasis.NAME),
            " in ",
            (f"{coarse_value} {coarse} ", Emphasis.VALUE),
            f"({fine_value} {fine})",
        ))

    def _print_message(self, message: str, nanos: int) -> None:
        unit = unit_of(nanos)
        logger.debug("%s: %s -> %d ns", self._name, message, nanos)
        self._emit(Text.assemble(
            "(",
            (self._name, Emphasis.NAME),
            ") ",
            (f"{message} ", Emphasis.MESSAGE),
            "-> ",
            (f"{to_unit(nanos, unit)} {unit} ", Emphasis.VALUE),
        ))

    def _emit(self, text: Text) -> None:
        self._console.print(text, soft_wrap=True)
        self._log_func(text.plain)

    def _ensure_running(self) -> None:
        if self._status != Status.RUNNING:
            raise RuntimeError(f"Benchmark '{self._name}' has already ended.")

    def __enter__(self) -> Self:
        return self

    def __exit__(self,
                 exc_type: Optional[Type[BaseException]],
                 exc_value: Optional[BaseException],
                 traceback: Optional[TracebackType]) -> None:
        if self._status == Status.RUNNING:
            self.end()
            if exc_type is not None:
                self._status = Status.FAILED

    def __repr__(self) -> str:
        parts = [f'name={self._name}']
        if self._total_ns is not None:
            parts.append(f'total={self._total_ns}ns')
        parts.append(f'status={self._status}')
        return f"Benchmark({', '.join(parts)})"


def start(name: object, *, console: Optional[Console] = None, verbose: bool = False,
          log_func: Callable[[str], None] = logger.info) -> Benchmark:
    """Start a named benchmark.

    Prints `running <name>...` and captures the start timestamp.

    Args:
        name: display label; anything that is not a string is passed through str()
        console: rich console to print to, defaults to one writing to stdout
        verbose: also send the plain text of every line to log_func
        log_func: receives plain lines when verbose is set

    Returns:
        Benchmark: the running benchmark
    """
    return Benchmark(name, console=console, verbose=verbose, log_func=log_func)


@overload
def timed(func: Callable[P, R]) -> Callable[P, R]: ...
@overload
def timed(*, name: Optional[str] = None, console: Optional[Console] = None,
          verbose: bool = False,
          log_func: Callable[[str], None] = logger.info) -> Callable[[Callable[P, R]], Callable[P, R]]: ...
def timed(func: Optional[Callable[P, R]] = None, *, name: Optional[str] = None,
          console: Optional[Console] = None, verbose: bool = False,
          log_func: Callable[[str], None] = logger.info
          ) -> Union[Callable[P, R], Callable[[Callable[P, R]], Callable[P, R]]]:
    """Decorator that runs each call of a function as its own benchmark.

    Works bare (`@timed`) or with options (`@timed(name='load')`), on plain
    and async functions. The benchmark is named after the function unless a
    name is given, and is ended even when the call raises.
    """
    def decorate(fn: Callable[P, R]) -> Callable[P, R]:
        key: str = name if name is not None else fn.__name__

        if iscoroutinefunction(fn):
            async_fn: Callable[P, Awaitable[R]] = fn  # type: ignore[assignment]

            @wraps(fn)
            async def async_wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
                with start(key, console=console, verbose=verbose, log_func=log_func):
                    result: R = await async_fn(*args, **kwargs)
                return result
            return async_wrapper  # type: ignore[return-value]

        @wraps(fn)
        def wrapper(*args: P.args, **kwargs: P.kwargs) -> R:
            with start(key, console=console, verbose=verbose, log_func=log_func):
                result: R = fn(*args, **kwargs)
            return result
        return wrapper

    if func is not None:
        return decorate(func)
    return decorate
