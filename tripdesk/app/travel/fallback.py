"""Fixed hotel, activity and restaurant templates per city.

Used by the mock itinerary supplier; prices are EUR.
"""

from typing import Any

from tripdesk.app.travel.locations import match_city

HOTELS: dict[str, list[dict[str, Any]]] = {
    "paris": [
        {"name": "Hotel Le Marais", "rating": 4, "price": 180, "amenities": ["WiFi", "Breakfast", "Air Conditioning"], "address": "Le Marais District"},
        {"name": "Montmartre Residence", "rating": 4, "price": 150, "amenities": ["WiFi", "Terrace", "City View"], "address": "Montmartre"},
        {"name": "Saint-Germain Palace", "rating": 5, "price": 320, "amenities": ["WiFi", "Spa", "Restaurant", "Bar"], "address": "Saint-Germain-des-Prés"},
    ],
    "rome": [
        {"name": "Hotel Trastevere", "rating": 4, "price": 160, "amenities": ["WiFi", "Breakfast", "Rooftop"], "address": "Trastevere"},
        {"name": "Colosseum View Inn", "rating": 4, "price": 190, "amenities": ["WiFi", "Air Conditioning", "City View"], "address": "Near Colosseum"},
        {"name": "Vatican Suites", "rating": 5, "price": 280, "amenities": ["WiFi", "Spa", "Restaurant"], "address": "Near Vatican"},
    ],
    "barcelona": [
        {"name": "Gothic Quarter Hotel", "rating": 4, "price": 140, "amenities": ["WiFi", "Breakfast", "Terrace"], "address": "Gothic Quarter"},
        {"name": "Barceloneta Beach Resort", "rating": 4, "price": 200, "amenities": ["WiFi", "Pool", "Beach Access"], "address": "Barceloneta"},
        {"name": "Eixample Boutique", "rating": 5, "price": 260, "amenities": ["WiFi", "Spa", "Restaurant", "Gym"], "address": "Eixample"},
    ],
    "athens": [
        {"name": "Monastiraki Square Inn", "rating": 4, "price": 100, "amenities": ["WiFi", "Air Conditioning"], "address": "Monastiraki"},
        {"name": "Plaka Heritage Hotel", "rating": 4, "price": 120, "amenities": ["WiFi", "Breakfast", "Rooftop"], "address": "Plaka"},
        {"name": "Syntagma Grand", "rating": 5, "price": 220, "amenities": ["WiFi", "Spa", "Pool", "Restaurant"], "address": "Syntagma Square"},
    ],
}
DEFAULT_HOTELS = [
    {"name": "Old Town Inn", "rating": 4, "price": 130, "amenities": ["WiFi", "Terrace"], "address": "Old Town"},
    {"name": "City Center Hotel", "rating": 4, "price": 150, "amenities": ["WiFi", "Breakfast", "Air Conditioning"], "address": "City Center"},
    {"name": "Grand Plaza Hotel", "rating": 5, "price": 250, "amenities": ["WiFi", "Spa", "Pool", "Restaurant"], "address": "Main Square"},
]

ACTIVITIES: dict[str, list[dict[str, Any]]] = {
    "paris": [
        {"title": "Eiffel Tower Visit", "description": "Iconic iron tower with panoramic views", "price": 26, "duration": "2-3 hours"},
        {"title": "Louvre Museum", "description": "World's largest art museum", "price": 17, "duration": "3-4 hours"},
        {"title": "Seine River Cruise", "description": "Scenic boat tour", "price": 15, "duration": "1 hour"},
        {"title": "Montmartre Walking Tour", "description": "Explore the artistic neighborhood", "price": 20, "duration": "2 hours"},
    ],
    "rome": [
        {"title": "Colosseum Tour", "description": "Ancient Roman amphitheater", "price": 18, "duration": "2-3 hours"},
        {"title": "Vatican Museums", "description": "Art collection and Sistine Chapel", "price": 17, "duration": "3-4 hours"},
        {"title": "Roman Forum Walk", "description": "Ancient ruins exploration", "price": 16, "duration": "2 hours"},
        {"title": "Trastevere Food Tour", "description": "Taste authentic Roman cuisine", "price": 65, "duration": "3 hours"},
    ],
    "barcelona": [
        {"title": "Sagrada Familia", "description": "Gaudí's masterpiece basilica", "price": 26, "duration": "2 hours"},
        {"title": "Park Güell", "description": "Colorful mosaic park", "price": 10, "duration": "2 hours"},
        {"title": "Gothic Quarter Tour", "description": "Medieval streets exploration", "price": 15, "duration": "2 hours"},
        {"title": "La Boqueria Market", "description": "Famous food market visit", "price": 0, "duration": "1-2 hours"},
    ],
    "athens": [
        {"title": "Acropolis Tour", "description": "Ancient citadel with Parthenon", "price": 20, "duration": "3 hours"},
        {"title": "Acropolis Museum", "description": "Modern museum with ancient artifacts", "price": 15, "duration": "2-3 hours"},
        {"title": "Plaka Walking Tour", "description": "Historic neighborhood exploration", "price": 0, "duration": "2 hours"},
        {"title": "Greek Cooking Class", "description": "Learn traditional recipes", "price": 75, "duration": "4 hours"},
    ],
}
DEFAULT_ACTIVITIES = [
    {"title": "City Walking Tour", "description": "Explore the main attractions", "price": 20, "duration": "3 hours"},
    {"title": "Local Museum Visit", "description": "Discover local history and culture", "price": 15, "duration": "2 hours"},
    {"title": "Food Tasting Tour", "description": "Sample local cuisine", "price": 50, "duration": "3 hours"},
    {"title": "Sunset Viewpoint", "description": "Best views of the city", "price": 0, "duration": "1 hour"},
]

RESTAURANTS: dict[str, list[dict[str, Any]]] = {
    "paris": [
        {"name": "Le Petit Cler", "cuisine": "French", "priceRange": "€€", "rating": 4.5},
        {"name": "Bouillon Chartier", "cuisine": "Traditional French", "priceRange": "€", "rating": 4.3},
        {"name": "L'Ami Jean", "cuisine": "Basque", "priceRange": "€€€", "rating": 4.7},
    ],
    "rome": [
        {"name": "Da Enzo al 29", "cuisine": "Roman", "priceRange": "€€", "rating": 4.6},
        {"name": "Pizzarium", "cuisine": "Pizza", "priceRange": "€", "rating": 4.5},
        {"name": "Roscioli", "cuisine": "Italian", "priceRange": "€€€", "rating": 4.7},
    ],
    "barcelona": [
        {"name": "Can Culleretes", "cuisine": "Catalan", "priceRange": "€€", "rating": 4.4},
        {"name": "Bar del Pla", "cuisine": "Tapas", "priceRange": "€€", "rating": 4.5},
        {"name": "Tickets", "cuisine": "Modern Spanish", "priceRange": "€€€", "rating": 4.8},
    ],
    "athens": [
        {"name": "Karamanlidika", "cuisine": "Greek Deli", "priceRange": "€€", "rating": 4.6},
        {"name": "Ta Karamanlidika tou Fani", "cuisine": "Greek", "priceRange": "€€", "rating": 4.5},
        {"name": "Funky Gourmet", "cuisine": "Modern Greek", "priceRange": "€€€€", "rating": 4.7},
    ],
}
DEFAULT_RESTAURANTS = [
    {"name": "Local Taverna", "cuisine": "Local", "priceRange": "€€", "rating": 4.3},
    {"name": "City Bistro", "cuisine": "International", "priceRange": "€€", "rating": 4.4},
    {"name": "Fine Dining Restaurant", "cuisine": "Gourmet", "priceRange": "€€€", "rating": 4.6},
]


def _lookup(destination: str, table: dict[str, list[dict[str, Any]]], default: list[dict[str, Any]]) -> list[dict[str, Any]]:
    city = match_city(destination, table)
    source = table[city] if city is not None else default
    return [dict(entry) for entry in source]


def hotels_for(destination: str) -> list[dict[str, Any]]:
    """Hotels ordered cheapest first."""
    return sorted(_lookup(destination, HOTELS, DEFAULT_HOTELS), key=lambda h: h["price"])


def activities_for(destination: str) -> list[dict[str, Any]]:
    return _lookup(destination, ACTIVITIES, DEFAULT_ACTIVITIES)


def restaurants_for(destination: str) -> list[dict[str, Any]]:
    return _lookup(destination, RESTAURANTS, DEFAULT_RESTAURANTS)
