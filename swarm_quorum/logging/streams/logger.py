import asyncio
import pathlib
import sys
from typing import Dict

from swarm_quorum.logging.models import Entry, Log

from .logger_stream import LoggerStream


def to_logfile_path(path: str) -> str:
    """A ``.json`` file is used as is, a directory gets ``logs.json``."""
    logfile_path = pathlib.Path(path).absolute()

    if not logfile_path.suffix:
        return str(logfile_path / "logs.json")

    if logfile_path.suffix != ".json":
        raise ValueError(f"Log file {path!r} must be a .json file")

    return str(logfile_path)


class Logger:
    def __init__(self) -> None:
        self._streams: Dict[str, LoggerStream] = {}

    def configure(
        self,
        name: str | None = None,
        template: str | None = None,
        path: str | None = None,
    ):
        if name is None:
            name = 'default'

        self._streams[name] = LoggerStream(
            name=name,
            template=template,
            logfile_path=to_logfile_path(path) if path else None,
        )

    async def log(
        self,
        entry: Entry,
        name: str | None = None,
    ):
        if name is None:
            name = 'default'

        stream = self._streams.get(name)
        if stream is None:
            stream = self._streams[name] = LoggerStream(name=name)

        await stream.log(Log.from_frame(entry, sys._getframe(1)))

    async def close(self):
        await asyncio.gather(*[
            stream.close() for stream in self._streams.values()
        ])
