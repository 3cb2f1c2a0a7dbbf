"""
Output sinks for rendered report and code text.

Every writer in dsconv talks to a single Sink. The caller decides where the
text actually goes by attaching zero, one, or several concrete sinks:

    ConsoleSink   Rich console (stdout)
    FileSink      A file the sink opens and owns
    MemorySink    An in-memory list of lines (tests, previews)
    NullSink      Discards everything
    TeeSink       Fans each line out to several sinks

Usage:
    with TeeSink(ConsoleSink(), FileSink(log_path)) as sink:
        sink.write_line("type: int")
"""

from pathlib import Path
from typing import List, Optional, TextIO

from rich.console import Console


class Sink:
    """Receives rendered text one logical line at a time."""

    def write_line(self, text: str = "") -> None:
        raise NotImplementedError

    def write_lines(self, lines) -> None:
        for line in lines:
            self.write_line(line)

    def write_block(self, text: str) -> None:
        """Write multi-line text, one write_line per line."""
        for line in text.splitlines():
            self.write_line(line)

    def close(self) -> None:
        pass

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False


class NullSink(Sink):
    def write_line(self, text: str = "") -> None:
        pass


class MemorySink(Sink):
    """Collects lines in memory."""

    def __init__(self):
        self.lines: List[str] = []

    def write_line(self, text: str = "") -> None:
        self.lines.append(text)

    def getvalue(self) -> str:
        return "".join(f"{line}\n" for line in self.lines)


class ConsoleSink(Sink):
    """
    Writes lines verbatim to a Rich console's output stream.

    Lines bypass Console.print, so tabs and carriage returns reach the
    stream unchanged.
    """

    def __init__(self, console: Optional[Console] = None):
        self.console = console or Console(highlight=False, soft_wrap=True)

    def write_line(self, text: str = "") -> None:
        self.console.file.write(f"{text}\n")


class FileSink(Sink):
    """
    Writes lines to a file.

    The file is opened on the first write, so a sink that never receives
    text never creates its file. mode='a' appends to an existing file.
    """

    def __init__(self, path: Path, mode: str = 'w'):
        if mode not in ('w', 'a'):
            raise ValueError(f"Unsupported file mode: {mode!r}")
        self.path = Path(path)
        self.mode = mode
        self._file: Optional[TextIO] = None

    def write_line(self, text: str = "") -> None:
        if self._file is None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self._file = open(self.path, self.mode, encoding='utf-8')
        self._file.write(f"{text}\n")

    def close(self) -> None:
        if self._file is not None:
            self._file.close()
            self._file = None


class TeeSink(Sink):
    """Forwards each line to every attached sink, in order."""

    def __init__(self, *sinks: Sink):
        self.sinks = list(sinks)

    def attach(self, sink: Sink) -> None:
        self.sinks.append(sink)

    def write_line(self, text: str = "") -> None:
        for sink in self.sinks:
            sink.write_line(text)

    def close(self) -> None:
        for sink in self.sinks:
            sink.close()
