import asyncio
import io
import pathlib
import sys

import msgspec

from swarm_quorum.logging.config import LoggingConfig, StreamType
from swarm_quorum.logging.models import Log


DEFAULT_TEMPLATE = "{timestamp} - {level} - {thread_id} - {filename}:{function_name}.{line_number} - {message}"


class LoggerStream:
    """
    Output of one named logger.

    Without a logfile path, entries are rendered through ``template`` to
    stdout or stderr. With one, every ``Log`` is appended to the file as a
    single JSON line. Writes run in the default executor.
    """

    def __init__(
        self,
        name: str = "default",
        template: str | None = None,
        logfile_path: str | None = None,
    ) -> None:
        self._name = name
        self._template = template or DEFAULT_TEMPLATE
        self._logfile_path = logfile_path
        self._logfile: io.BufferedWriter | None = None
        self._file_lock = asyncio.Lock()
        self._config = LoggingConfig()

    @property
    def logfile_path(self) -> str | None:
        return self._logfile_path

    async def log(self, log: Log):
        if self._config.enabled(self._name, log.entry.level) is False:
            return

        loop = asyncio.get_running_loop()

        if self._logfile_path is None:
            line = log.entry.to_template(
                self._template,
                context={
                    "filename": log.filename,
                    "function_name": log.function_name,
                    "line_number": log.line_number,
                    "thread_id": log.thread_id,
                    "timestamp": log.timestamp,
                },
            )

            await loop.run_in_executor(
                None,
                self._write_to_console,
                line,
                self._config.output,
            )

            return

        async with self._file_lock:
            await loop.run_in_executor(
                None,
                self._write_to_file,
                msgspec.json.encode(log) + b"\n",
            )

    def _write_to_console(
        self,
        line: str,
        stream_type: StreamType,
    ):
        # Resolved per write so redirected streams are honored
        stream = sys.stdout if stream_type == StreamType.STDOUT else sys.stderr

        try:
            stream.write(line + "\n")
            stream.flush()

        except (OSError, ValueError):
            pass

    def _write_to_file(self, data: bytes):
        try:
            if self._logfile is None or self._logfile.closed:
                logfile_path = pathlib.Path(self._logfile_path)
                logfile_path.parent.mkdir(parents=True, exist_ok=True)
                self._logfile = open(logfile_path, "ab")

            self._logfile.write(data)
            self._logfile.flush()

        except (OSError, ValueError):
            pass

    async def close(self):
        if self._logfile is None or self._logfile.closed:
            return

        async with self._file_lock:
            await asyncio.get_running_loop().run_in_executor(
                None,
                self._logfile.close,
            )
