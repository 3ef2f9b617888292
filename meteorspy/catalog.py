from types import MappingProxyType

POPULAR_DESIGNATIONS = MappingProxyType(
    {
        "apophis": "99942",
        "eros": "433",
        "bennu": "101955",
        "ryugu": "162173",
        "didymos": "65803",
        "dimorphos": "65803",
        "halley": "1P",
        "halleya": "1P",
        "oumuamua": "1I",
        "borisov": "2I",
        "ceres": "1",
        "pallas": "2",
        "vesta": "4",
        "psyche": "16",
    }
)


def resolve_designation(name: str) -> str:
    """Map a well-known name to its designation; unknown names pass through."""
    return POPULAR_DESIGNATIONS.get(name.lower(), name)
