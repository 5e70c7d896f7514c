"""Immutable records parsed from the stand server's JSON responses.

Records are built once from a decoded JSON object, kept in page state and
thrown away on the next fetch.  Values present in the JSON are trusted as-is;
``from_json`` only coerces what is needed to build the record.
"""
import logging
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

_log = logging.getLogger('standapp.models')

_HEX_RE = re.compile(r'^[0-9a-fA-F]+$')


def _optional_int(value: Any) -> Optional[int]:
    if value is None or value == '':
        return None
    return int(value)


def _number(value: Any) -> float:
    if value is None or value == '':
        return 0
    if isinstance(value, (int, float)):
        return value
    return float(value)


@dataclass(frozen=True)
class Color:
    """An RGBA display colour; each channel is 0-255."""
    red: int
    green: int
    blue: int
    alpha: int = 255

    @property
    def hex(self) -> str:
        """``#RRGGBB`` for opaque colours, ``#RRGGBBAA`` otherwise."""
        base = f"#{self.red:02X}{self.green:02X}{self.blue:02X}"
        if self.alpha == 255:
            return base
        return f"{base}{self.alpha:02X}"

    @property
    def css(self) -> str:
        """CSS ``rgba()`` notation used by the web GUI."""
        return f"rgba({self.red}, {self.green}, {self.blue}, {round(self.alpha / 255, 3)})"


def parse_hex_color(value: str) -> Color:
    """Decode ``#RRGGBB`` or ``#RRGGBBAA`` (leading ``#`` optional).

    Raises:
        ValueError: *value* is not a 6- or 8-digit hex string.
    """
    if not isinstance(value, str):
        raise ValueError(f"Colour must be a string, got {type(value).__name__}")
    digits = value.strip().replace('#', '')
    if len(digits) not in (6, 8) or not _HEX_RE.match(digits):
        raise ValueError(f"Invalid hex colour string: {value!r}")
    # Alpha is the trailing byte (RRGGBBAA).  Colours stored in ARGB order
    # (AARRGGBB, as some older clients of the server wrote them) decode with
    # shifted channels here.
    red, green, blue = (int(digits[i:i + 2], 16) for i in (0, 2, 4))
    alpha = int(digits[6:8], 16) if len(digits) == 8 else 255
    return Color(red, green, blue, alpha)


def hex_to_color(value: Optional[str], default: str) -> Color:
    """Decode *value*, falling back to *default* when absent or malformed.

    Never raises for a bad *value*; the fallback is logged at WARNING so a
    broken settings entry does not break the page load.
    """
    if value is None or value == '':
        return parse_hex_color(default)
    try:
        return parse_hex_color(value)
    except ValueError:
        _log.warning("Invalid hex colour string %r, using %s", value, default)
        return parse_hex_color(default)


@dataclass(frozen=True)
class Room:
    """A room stands can be assigned to.  Rooms compare by ``id`` only."""
    id: int
    name: str = field(compare=False)

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Room':
        return cls(id=int(data['id']), name=data['name'])


@dataclass(frozen=True)
class Stand:
    """An exhibition booth with an optional room assignment.

    ``room_name`` is the denormalised name the server sends along with
    ``room_id``.
    """
    id: int
    name: str
    description: Optional[str] = None
    room_id: Optional[int] = None
    room_name: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Stand':
        return cls(
            id=int(data['id']),
            name=data['name'],
            description=data.get('description'),
            room_id=_optional_int(data.get('room_id')),
            room_name=data.get('room_name'),
        )


@dataclass(frozen=True)
class Criterion:
    """A scoring criterion; evaluators award 0..``max_score`` points for it."""
    id: int
    name: str
    max_score: int
    description: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Criterion':
        return cls(
            id=int(data['id']),
            name=data['name'],
            max_score=int(data['max_score']),
            description=data.get('description'),
        )


@dataclass(frozen=True)
class RankingEntry:
    """One leaderboard row: a stand, its room and its aggregated score."""
    rank: int
    stand_name: str
    room_name: Optional[str]
    total_score: float
    evaluator_count: int

    @classmethod
    def from_json(cls, data: Dict[str, Any], position: int = 1) -> 'RankingEntry':
        """Build an entry; *position* (1-based) is used when ``rank`` is missing."""
        rank = data.get('rank')
        return cls(
            rank=int(rank) if rank is not None else position,
            stand_name=data.get('stand_name') or '',
            room_name=data.get('room_name'),
            total_score=_number(data.get('total_achieved_score')),
            evaluator_count=int(_number(data.get('evaluator_count'))),
        )


# Defaults used when the server omits a colour or sends a malformed one.
DEFAULT_GRADIENT_COLOR1 = '#E3F2FD'
DEFAULT_GRADIENT_COLOR2 = '#BBDEFB'
DEFAULT_DARK_GRADIENT_COLOR1 = '#000000'
DEFAULT_DARK_GRADIENT_COLOR2 = '#455A64'
DEFAULT_APP_TITLE = 'Stand App'


@dataclass(frozen=True)
class ThemeSettings:
    """Background gradient colours and branding from ``/api/admin_settings``."""
    gradient_color1: Color = field(default_factory=lambda: parse_hex_color(DEFAULT_GRADIENT_COLOR1))
    gradient_color2: Color = field(default_factory=lambda: parse_hex_color(DEFAULT_GRADIENT_COLOR2))
    dark_gradient_color1: Color = field(default_factory=lambda: parse_hex_color(DEFAULT_DARK_GRADIENT_COLOR1))
    dark_gradient_color2: Color = field(default_factory=lambda: parse_hex_color(DEFAULT_DARK_GRADIENT_COLOR2))
    title: str = DEFAULT_APP_TITLE
    logo_path: Optional[str] = None

    @classmethod
    def from_json(cls, settings: Dict[str, Any]) -> 'ThemeSettings':
        return cls(
            gradient_color1=hex_to_color(settings.get('bg_gradient_color1'), DEFAULT_GRADIENT_COLOR1),
            gradient_color2=hex_to_color(settings.get('bg_gradient_color2'), DEFAULT_GRADIENT_COLOR2),
            dark_gradient_color1=hex_to_color(settings.get('dark_bg_gradient_color1'),
                                              DEFAULT_DARK_GRADIENT_COLOR1),
            dark_gradient_color2=hex_to_color(settings.get('dark_bg_gradient_color2'),
                                              DEFAULT_DARK_GRADIENT_COLOR2),
            title=settings.get('index_title_text') or DEFAULT_APP_TITLE,
            logo_path=settings.get('logo_path') or None,
        )

    def gradient(self, dark_mode: bool = False) -> List[Color]:
        """Return the two gradient stops for the active brightness."""
        if dark_mode:
            return [self.dark_gradient_color1, self.dark_gradient_color2]
        return [self.gradient_color1, self.gradient_color2]

    def logo_url(self, server_address: str) -> Optional[str]:
        """Absolute logo URL; relative paths are joined to *server_address*."""
        if not self.logo_path:
            return None
        if self.logo_path.startswith(('http://', 'https://')):
            return self.logo_path
        return f"{server_address.rstrip('/')}/{self.logo_path.lstrip('/')}"


@dataclass(frozen=True)
class Session:
    """Login state persisted between runs."""
    server_address: Optional[str] = None
    username: Optional[str] = None
    session_cookie: Optional[str] = None
    user_role: Optional[str] = None

    @classmethod
    def from_json(cls, data: Dict[str, Any]) -> 'Session':
        return cls(
            server_address=data.get('server_address'),
            username=data.get('username'),
            session_cookie=data.get('session_cookie'),
            user_role=data.get('user_role'),
        )

    def to_json(self) -> Dict[str, Any]:
        return {
            'server_address': self.server_address,
            'username': self.username,
            'session_cookie': self.session_cookie,
            'user_role': self.user_role,
        }
