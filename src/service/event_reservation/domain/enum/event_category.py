from enum import StrEnum


class EventCategory(StrEnum):
    MUSIC = 'music'
    ART = 'art'
    SPORTS = 'sports'
    EDUCATION = 'education'
    COMMUNITY = 'community'
    TECHNOLOGY = 'technology'
    OTHER = 'other'
