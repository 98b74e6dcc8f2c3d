"""Process-scoped metric registry and its text exposition."""

from __future__ import annotations

import logging
from threading import Lock
from typing import Dict, Iterator, List, TypeVar

from ..utils.errors import DuplicateNameError
from .instruments import Instrument, LabelKey, format_value

CONTENT_TYPE_LATEST = "text/plain; version=0.0.4; charset=utf-8"

logger = logging.getLogger(__name__)

InstrumentT = TypeVar("InstrumentT", bound=Instrument)


def _escape_help(text: str) -> str:
    return text.replace("\\", r"\\").replace("\n", r"\n")


def _escape_label_value(value: str) -> str:
    return value.replace("\\", r"\\").replace("\n", r"\n").replace('"', r"\"")


def _format_labels(labels: LabelKey) -> str:
    if not labels:
        return ""
    pairs = ",".join(f'{name}="{_escape_label_value(value)}"' for name, value in labels)
    return "{" + pairs + "}"


class MetricRegistry:
    """Owns uniquely named instruments and renders them on demand."""

    content_type = CONTENT_TYPE_LATEST

    def __init__(self) -> None:
        self._lock = Lock()
        self._instruments: Dict[str, Instrument] = {}

    def register(self, instrument: InstrumentT) -> InstrumentT:
        """Add ``instrument``; raise :class:`DuplicateNameError` if the name is taken."""

        with self._lock:
            if instrument.name in self._instruments:
                raise DuplicateNameError(instrument.name)
            self._instruments[instrument.name] = instrument
        logger.debug("Registered %s %s", instrument.kind, instrument.name)
        return instrument

    def get(self, name: str) -> Instrument | None:
        with self._lock:
            return self._instruments.get(name)

    def __contains__(self, name: object) -> bool:
        with self._lock:
            return name in self._instruments

    def __iter__(self) -> Iterator[Instrument]:
        with self._lock:
            instruments = list(self._instruments.values())
        return iter(instruments)

    def __len__(self) -> int:
        with self._lock:
            return len(self._instruments)

    def render(self) -> str:
        """Return the exposition text for every registered instrument.

        Rendering only reads state. Time-varying instruments such as a
        "generated at" gauge must be updated by the caller beforehand.
        """

        lines: List[str] = []
        for instrument in self:
            lines.append(f"# HELP {instrument.name} {_escape_help(instrument.help)}")
            lines.append(f"# TYPE {instrument.name} {instrument.kind}")
            for sample_name, labels, value in instrument.samples():
                lines.append(
                    f"{sample_name}{_format_labels(labels)} {format_value(value)}"
                )
        if not lines:
            return ""
        return "\n".join(lines) + "\n"


__all__ = ["CONTENT_TYPE_LATEST", "MetricRegistry"]
