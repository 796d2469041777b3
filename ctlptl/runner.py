"""Running external commands, with a fake for tests."""

from __future__ import annotations

import io
import subprocess
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from typing import IO, Any, Protocol


@dataclass
class IOStreams:
    """Standard input, output and error streams for a command.

    ``None`` means the null device for input and discarded output.
    """

    stdin: Any = None
    out: Any = None
    err_out: Any = None


class CmdRunner(Protocol):
    """Something that can run a command."""

    def run(self, cmd: str, *args: str) -> None: ...

    def run_io(self, iostreams: IOStreams, cmd: str, *args: str) -> None: ...


def _fileno(stream: Any) -> int | None:
    try:
        return stream.fileno()
    except (AttributeError, OSError, ValueError):
        return None


def _is_binary(stream: Any) -> bool:
    return isinstance(stream, (io.RawIOBase, io.BufferedIOBase))


def _emit(stream: Any, data: bytes | None) -> None:
    if stream is None or not data:
        return
    if _is_binary(stream):
        stream.write(data)
    else:
        stream.write(data.decode("utf-8", errors="replace"))


def _output_target(stream: Any) -> Any:
    if stream is None:
        return subprocess.DEVNULL
    if _fileno(stream) is not None:
        stream.flush()
        return stream
    return subprocess.PIPE


class RealCmdRunner:
    """Runs commands as subprocesses."""

    def run(self, cmd: str, *args: str) -> None:
        """Run a command, capturing its output; raise CalledProcessError on failure."""
        subprocess.run([cmd, *args], capture_output=True, stdin=subprocess.DEVNULL, check=True)

    def run_io(self, iostreams: IOStreams, cmd: str, *args: str) -> None:
        """Run a command wired to the given streams; raise CalledProcessError on failure."""
        kwargs: dict[str, Any] = {}
        stdin = iostreams.stdin
        if stdin is None:
            kwargs["stdin"] = subprocess.DEVNULL
        elif isinstance(stdin, str):
            kwargs["input"] = stdin.encode("utf-8")
        elif isinstance(stdin, (bytes, bytearray)):
            kwargs["input"] = bytes(stdin)
        elif _fileno(stdin) is not None:
            kwargs["stdin"] = stdin
        else:
            data = stdin.read()
            kwargs["input"] = data.encode("utf-8") if isinstance(data, str) else data

        stdout = _output_target(iostreams.out)
        stderr = _output_target(iostreams.err_out)
        result = subprocess.run([cmd, *args], stdout=stdout, stderr=stderr, **kwargs)
        if stdout is subprocess.PIPE:
            _emit(iostreams.out, result.stdout)
        if stderr is subprocess.PIPE:
            _emit(iostreams.err_out, result.stderr)
        result.check_returncode()


@dataclass
class FakeCmdRunner:
    """Records each command and answers it with a handler's output."""

    handler: Callable[[list[str]], str]
    last_args: list[str] = field(default_factory=list)

    def __init__(self, handler: Callable[[list[str]], str]) -> None:
        self.handler = handler
        self.last_args = []

    def _record(self, cmd: str, args: Sequence[str]) -> list[str]:
        argv = [cmd, *args]
        self.last_args = list(argv)
        return argv

    def run(self, cmd: str, *args: str) -> None:
        self.handler(self._record(cmd, args))

    def run_io(self, iostreams: IOStreams, cmd: str, *args: str) -> None:
        output = self.handler(self._record(cmd, args))
        out: IO[Any] | None = iostreams.out
        if out is not None and output:
            if _is_binary(out):
                out.write(output.encode("utf-8"))
            else:
                out.write(output)