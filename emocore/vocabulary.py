"""
Closed vocabularies for state of mind samples.

Every member carries a stable integer code shared with the health record
store. Codes have gaps reserved for future additions, so lookups by code are
fallible and return None for anything this package does not know about.
"""

from enum import IntEnum
from typing import Self


def _fold(name: str) -> str:
    return name.replace("_", "").replace("-", "").replace(" ", "").lower()


class CodedEnum(IntEnum):
    """Base for code-identified enums with display strings."""

    @classmethod
    def from_code(cls, code: int) -> Self | None:
        """Return the member for ``code``, or None if the code is unknown."""
        try:
            return cls(code)
        except ValueError:
            return None

    @classmethod
    def resolve(cls, value: int | str) -> Self | None:
        """
        Resolve a code or a symbolic name to a member.

        Accepts an integer code, a string of digits, or a member name matched
        case-insensitively with separators ignored ("self-care", "selfCare").
        Returns None when nothing matches.
        """
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return cls.from_code(value)

        text = value.strip()
        if text.isascii() and text.isdecimal():
            try:
                return cls.from_code(int(text))
            except ValueError:
                # Longer than int() will convert
                return None

        folded = _fold(text)
        for member in cls:
            if _fold(member.name) == folded:
                return member
        return None

    @property
    def display_name(self) -> str:
        return self.name.replace("_", " ").title()


class Kind(CodedEnum):
    """Whether a sample is a momentary emotion or a summary of the day."""

    MOMENTARY_EMOTION = 1
    DAILY_MOOD = 2

    @property
    def display_name(self) -> str:
        return "Moment" if self is Kind.MOMENTARY_EMOTION else "Day"

    @property
    def title(self) -> str:
        return "Emotion" if self is Kind.MOMENTARY_EMOTION else "Mood"


class Label(CodedEnum):
    """A specific word describing a felt experience."""

    AMAZED = 1
    AMUSED = 2
    ANGRY = 3
    ANXIOUS = 4
    ASHAMED = 5
    BRAVE = 6
    CALM = 7
    CONTENT = 8
    DISAPPOINTED = 9
    DISCOURAGED = 10
    DISGUSTED = 11
    EMBARRASSED = 12
    EXCITED = 13
    FRUSTRATED = 14
    GRATEFUL = 15
    GUILTY = 16
    HAPPY = 17
    HOPELESS = 18
    IRRITATED = 19
    JEALOUS = 20
    JOYFUL = 21
    LONELY = 22
    PASSIONATE = 23
    PEACEFUL = 24
    PROUD = 25
    RELIEVED = 26
    SAD = 27
    SCARED = 28
    STRESSED = 29
    SURPRISED = 30
    WORRIED = 31
    ANNOYED = 32
    CONFIDENT = 33
    DRAINED = 34
    HOPEFUL = 35
    INDIFFERENT = 36
    OVERWHELMED = 37
    SATISFIED = 38


class Association(CodedEnum):
    """A general facet of life with which a felt experience may be associated."""

    COMMUNITY = 1
    CURRENT_EVENTS = 2
    DATING = 3
    EDUCATION = 4
    FAMILY = 5
    FITNESS = 6
    FRIENDS = 7
    HEALTH = 8
    HOBBIES = 9
    IDENTITY = 10
    MONEY = 11
    PARTNER = 12
    SELF_CARE = 13
    SPIRITUALITY = 14
    TASKS = 15
    TRAVEL = 16
    WORK = 17
    WEATHER = 18

    @property
    def display_name(self) -> str:
        if self is Association.SELF_CARE:
            return "Self-Care"
        return super().display_name
