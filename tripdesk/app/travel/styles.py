"""Travel styles derived from trip interests."""

from dataclasses import dataclass


@dataclass(frozen=True)
class TravelStyle:
    """A recognised interest with the activity ideas it suggests."""

    key: str
    label: str
    activity_ideas: tuple[str, ...]


TRAVEL_STYLES: dict[str, TravelStyle] = {
    style.key: style
    for style in (
        TravelStyle("shopping", "Shopping", ("Local market browse", "Fashion district stroll", "Boutique hopping")),
        TravelStyle("nightlife", "Nightlife", ("Rooftop bar evening", "Live music venue", "Cocktail bar crawl")),
        TravelStyle("culture", "Culture", ("Museum visit", "Historic landmarks walk", "Gallery afternoon")),
        TravelStyle("nature", "Nature", ("City park stroll", "Scenic viewpoint hike", "Beach afternoon")),
        TravelStyle("food", "Food", ("Street food tour", "Cooking class", "Food market tasting")),
        TravelStyle("adventure", "Adventure", ("Kayaking trip", "Zip-line park", "Rock climbing session")),
        TravelStyle("relaxation", "Relaxation", ("Spa session", "Yoga class", "Slow café morning")),
    )
}


def styles_for_interests(interests: list[str]) -> list[TravelStyle]:
    """Recognised travel styles among ``interests``, in interest order."""
    seen: set[str] = set()
    styles = []
    for interest in interests:
        key = interest.strip().lower()
        if key in TRAVEL_STYLES and key not in seen:
            seen.add(key)
            styles.append(TRAVEL_STYLES[key])
    return styles
