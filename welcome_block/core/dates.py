"""
Dates : service de formatage des timestamps.

Patterns au format PHP date() : "F jS, Y g:i a" → "November 14th, 2023 10:13 pm".
Un caractère précédé de "\\" est recopié tel quel ; tout caractère inconnu aussi.
"""
import calendar
import logging
import os
import time
from datetime import datetime, timezone as dt_timezone
from typing import Callable, Dict, Optional
from zoneinfo import ZoneInfo

log = logging.getLogger(__name__)

FALLBACK_FORMAT_ID = "fallback"
FALLBACK_PATTERN   = "D, m/d/Y - H:i"

# Caractères exposés au preview client (ordre de la plateforme)
SAMPLE_CHARS = "dDjlNSwzWFmMntLoYyaABgGhHisuveIOPTZcrU"


def site_timezone() -> str:
    return os.getenv("SITE_TIMEZONE", "UTC")


# ── Pattern PHP ─────────────────────────────────────────────────────────────

def _suffix(day: int) -> str:
    if 11 <= day % 100 <= 13:
        return "th"
    return {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")


def _offset(dt: datetime, colon: bool) -> str:
    seconds = int(dt.utcoffset().total_seconds())
    sign = "+" if seconds >= 0 else "-"
    hours, minutes = divmod(abs(seconds) // 60, 60)
    return f"{sign}{hours:02d}{':' if colon else ''}{minutes:02d}"


def _swatch(dt: datetime) -> str:
    utc = dt.astimezone(dt_timezone.utc)
    beats = ((utc.hour * 3600 + utc.minute * 60 + utc.second + 3600) % 86400) / 86.4
    return f"{int(beats):03d}"


def _tz_name(dt: datetime) -> str:
    key = getattr(dt.tzinfo, "key", None)
    return key or dt.tzname() or "UTC"


_CHARS: Dict[str, Callable[[datetime], str]] = {
    # Jour
    "d": lambda dt: f"{dt.day:02d}",
    "D": lambda dt: dt.strftime("%a"),
    "j": lambda dt: str(dt.day),
    "l": lambda dt: dt.strftime("%A"),
    "N": lambda dt: str(dt.isoweekday()),
    "S": lambda dt: _suffix(dt.day),
    "w": lambda dt: str(dt.isoweekday() % 7),
    "z": lambda dt: str(dt.timetuple().tm_yday - 1),
    # Semaine
    "W": lambda dt: f"{dt.isocalendar()[1]:02d}",
    # Mois
    "F": lambda dt: dt.strftime("%B"),
    "m": lambda dt: f"{dt.month:02d}",
    "M": lambda dt: dt.strftime("%b"),
    "n": lambda dt: str(dt.month),
    "t": lambda dt: str(calendar.monthrange(dt.year, dt.month)[1]),
    # Année
    "L": lambda dt: "1" if calendar.isleap(dt.year) else "0",
    "o": lambda dt: str(dt.isocalendar()[0]),
    "Y": lambda dt: str(dt.year),
    "y": lambda dt: f"{dt.year % 100:02d}",
    # Heure
    "a": lambda dt: "am" if dt.hour < 12 else "pm",
    "A": lambda dt: "AM" if dt.hour < 12 else "PM",
    "B": _swatch,
    "g": lambda dt: str(dt.hour % 12 or 12),
    "G": lambda dt: str(dt.hour),
    "h": lambda dt: f"{dt.hour % 12 or 12:02d}",
    "H": lambda dt: f"{dt.hour:02d}",
    "i": lambda dt: f"{dt.minute:02d}",
    "s": lambda dt: f"{dt.second:02d}",
    "u": lambda dt: f"{dt.microsecond:06d}",
    "v": lambda dt: f"{dt.microsecond // 1000:03d}",
    # Fuseau
    "e": _tz_name,
    "I": lambda dt: "1" if dt.dst() else "0",
    "O": lambda dt: _offset(dt, colon=False),
    "P": lambda dt: _offset(dt, colon=True),
    "p": lambda dt: "Z" if not dt.utcoffset() else _offset(dt, colon=True),
    "T": lambda dt: dt.tzname() or "UTC",
    "Z": lambda dt: str(int(dt.utcoffset().total_seconds())),
    # Date complète
    "c": lambda dt: format_pattern(dt, "Y-m-d\\TH:i:sP"),
    "r": lambda dt: format_pattern(dt, "D, d M Y H:i:s O"),
    "U": lambda dt: str(int(dt.timestamp())),
}


def format_pattern(dt: datetime, pattern: str) -> str:
    """Applique un pattern PHP date() à un datetime aware."""
    out = []
    escaped = False
    for ch in pattern:
        if escaped:
            out.append(ch)
            escaped = False
        elif ch == "\\":
            escaped = True
        elif ch in _CHARS:
            out.append(_CHARS[ch](dt))
        else:
            out.append(ch)
    return "".join(out)


# ── Service ─────────────────────────────────────────────────────────────────

class DateFormatter:
    """
    Formate un timestamp selon un format nommé du catalogue ou un pattern libre.

    format(ts, "medium")          → pattern du format "medium"
    format(ts, "custom", "Y-m-d") → pattern fourni
    Un id inconnu, ou "custom" sans pattern, retombe sur le format "fallback".
    """

    def __init__(self, storage=None, timezone: Optional[str] = None, clock: Callable[[], float] = time.time):
        self._storage = storage
        self._timezone = timezone
        self._clock = clock

    def _pattern_for(self, type: str, format: str) -> str:
        if type == "custom":
            if format:
                return format
            type = FALLBACK_FORMAT_ID
        if self._storage is not None:
            entity = self._storage.load(type) or self._storage.load(FALLBACK_FORMAT_ID)
            if entity is not None:
                return entity.pattern
        log.debug("Format %r absent du catalogue, fallback", type)
        return FALLBACK_PATTERN

    def format(self, timestamp: float, type: str = "medium", format: str = "",
               timezone: Optional[str] = None) -> str:
        tz = ZoneInfo(timezone or self._timezone or site_timezone())
        dt = datetime.fromtimestamp(timestamp, tz=tz)
        return format_pattern(dt, self._pattern_for(type, format))

    def get_sample_date_formats(self, timestamp: Optional[float] = None) -> Dict[str, str]:
        """Valeur de chaque caractère de pattern pour l'instant présent (preview client)."""
        ts = self._clock() if timestamp is None else timestamp
        return {ch: self.format(ts, "custom", ch) for ch in SAMPLE_CHARS}
