import re
from datetime import timedelta


class TimeParser:
    """
    Parses durations such as ``10s``, ``0.05s``, ``2m`` or ``1h30m`` into
    seconds. A bare number is seconds. Every character must belong to a
    ``<number><unit>`` group, so ``500ms`` is rejected.
    """

    _pattern = re.compile(r"(?P<val>\d+(?:\.\d+)?)(?P<unit>[smhdw]?)", flags=re.I)
    _units = {
        "s": "seconds",
        "m": "minutes",
        "h": "hours",
        "d": "days",
        "w": "weeks",
    }

    def __init__(self, time_amount: str | None = None) -> None:
        self.time: float | None = None
        if time_amount is not None:
            self.time = self.parse(time_amount)

    def parse(self, time_amount: str) -> float:
        text = time_amount.strip()

        total = timedelta()
        position = 0

        for match in self._pattern.finditer(text):
            if match.start() != position:
                break

            unit = self._units[(match.group("unit") or "s").lower()]
            total += timedelta(**{unit: float(match.group("val"))})
            position = match.end()

        if position == 0 or position != len(text):
            raise ValueError(f"Invalid duration {time_amount!r}")

        return total.total_seconds()
