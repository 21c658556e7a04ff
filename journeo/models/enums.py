"""
Journeo Backend — Closed Vocabularies
=======================================

What:  Enumerations for every closed-set field (mobility, season, audience,
       activity type, role, media type) and the single parser that turns
       client input into a member.
How:   Members are stored by NAME (VARCHAR, non-native enum) so the same schema
       works on PostgreSQL and SQLite. Input is case-insensitive; the English
       labels are accepted as aliases of the canonical names.

Example:
    >>> parse_choice(Mobility, " walk ", "mobility")
    <Mobility.A_PIED: 'A_PIED'>
"""

import enum
from typing import Dict, Type, TypeVar

from journeo.exceptions import InvalidArgumentError


class Mobility(str, enum.Enum):
    VOITURE = "VOITURE"
    VELO = "VELO"
    A_PIED = "A_PIED"
    MOTO = "MOTO"


class Season(str, enum.Enum):
    ETE = "ETE"
    PRINTEMPS = "PRINTEMPS"
    AUTOMNE = "AUTOMNE"
    HIVER = "HIVER"


class TargetAudience(str, enum.Enum):
    FAMILLE = "FAMILLE"
    SEUL = "SEUL"
    EN_GROUPE = "EN_GROUPE"
    ENTRE_AMIS = "ENTRE_AMIS"


class ActivityType(str, enum.Enum):
    MUSEE = "MUSEE"
    CHATEAU = "CHATEAU"
    ACTIVITE = "ACTIVITE"
    PARC = "PARC"
    GROTTE = "GROTTE"


class Role(str, enum.Enum):
    USER = "USER"
    ADMIN = "ADMIN"


class MediaType(str, enum.Enum):
    IMAGE = "IMAGE"
    VIDEO = "VIDEO"


# English labels accepted on input, mapped onto canonical member names
_ALIASES: Dict[type, Dict[str, str]] = {
    Mobility: {"CAR": "VOITURE", "BIKE": "VELO", "WALK": "A_PIED", "MOTORBIKE": "MOTO"},
    Season: {"SUMMER": "ETE", "SPRING": "PRINTEMPS", "AUTUMN": "AUTOMNE", "WINTER": "HIVER"},
    TargetAudience: {
        "FAMILY": "FAMILLE",
        "SOLO": "SEUL",
        "GROUP": "EN_GROUPE",
        "FRIENDS": "ENTRE_AMIS",
    },
    ActivityType: {
        "MUSEUM": "MUSEE",
        "CASTLE": "CHATEAU",
        "ACTIVITY": "ACTIVITE",
        "PARK": "PARC",
        "CAVE": "GROTTE",
    },
}

E = TypeVar("E", bound=enum.Enum)


def parse_choice(enum_cls: Type[E], raw: object, field: str) -> E:
    """
    Resolve client input to a member of `enum_cls`.

    Accepts a member itself, its canonical name in any case, or a registered
    alias. Spaces and hyphens count as underscores ("a pied", "en-groupe").

    Raises:
        InvalidArgumentError: for None, blanks and anything outside the closed set.
    """
    if isinstance(raw, enum_cls):
        return raw
    if raw is None or not str(raw).strip():
        raise InvalidArgumentError(
            message=f"{field} is required",
            context={"field": field},
        )

    key = str(raw).strip().upper().replace("-", "_").replace(" ", "_")
    key = _ALIASES.get(enum_cls, {}).get(key, key)
    try:
        return enum_cls[key]
    except KeyError:
        allowed = ", ".join(member.name for member in enum_cls)
        raise InvalidArgumentError(
            message=f"Invalid value '{raw}' for {field}. Allowed values: {allowed}",
            context={"field": field, "value": str(raw)},
        ) from None
