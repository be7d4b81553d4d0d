"""
Summary: Legacy ID3v1 genre table.
Why: ID3v1 genre bytes and ID3v2 "(N)" references both index this fixed list.
"""

from __future__ import annotations

import re
from typing import Final

ID3V1_GENRES: Final[tuple[str, ...]] = (
    "Blues", "Classic Rock", "Country", "Dance", "Disco", "Funk", "Grunge", "Hip-Hop",
    "Jazz", "Metal", "New Age", "Oldies", "Other", "Pop", "R&B", "Rap", "Reggae", "Rock",
    "Techno", "Industrial", "Alternative", "Ska", "Death Metal", "Pranks", "Soundtrack",
    "Euro-Techno", "Ambient", "Trip-Hop", "Vocal", "Jazz+Funk", "Fusion", "Trance",
    "Classical", "Instrumental", "Acid", "House", "Game", "Sound Clip", "Gospel", "Noise",
    "AlternRock", "Bass", "Soul", "Punk", "Space", "Meditative", "Instrumental Pop",
    "Instrumental Rock", "Ethnic", "Gothic", "Darkwave", "Techno-Industrial", "Electronic",
    "Pop-Folk", "Eurodance", "Dream", "Southern Rock", "Comedy", "Cult", "Gangsta", "Top 40",
    "Christian Rap", "Pop/Funk", "Jungle", "Native American", "Cabaret", "New Wave",
    "Psychadelic", "Rave", "Showtunes", "Trailer", "Lo-Fi", "Tribal", "Acid Punk",
    "Acid Jazz", "Polka", "Retro", "Musical", "Rock & Roll", "Hard Rock",
)  # fmt: skip

_GENRE_REFERENCE = re.compile(r"\((\d+)\)")


def genre_name(index: int) -> str | None:
    """Return the genre at ``index`` or ``None`` when out of range."""

    if 0 <= index < len(ID3V1_GENRES):
        return ID3V1_GENRES[index]
    return None


def resolve_genre(value: str | None) -> str | None:
    """Resolve an ``"(N)"`` reference through the table; other values pass through.

    >>> resolve_genre("(17)")
    'Rock'
    >>> resolve_genre("Shoegaze")
    'Shoegaze'
    """
    if not value:
        return value
    match = _GENRE_REFERENCE.fullmatch(value.strip())
    if match is None:
        return value
    return genre_name(int(match.group(1))) or value


__all__ = ["ID3V1_GENRES", "genre_name", "resolve_genre"]
