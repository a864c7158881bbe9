"""Mock dynasty data for testing and demo purposes."""

from typing import Any, Dict

# Documents use the same attribute names as the hosted collections
MOCK_DYNASTIES: Dict[str, Any] = {
    "groups": [
        {"$id": "japan", "name": "Japan", "flag": "🇯🇵"},
        {"$id": "brazil", "name": "Brazil", "flag": "🇧🇷"},
        {"$id": "iceland", "name": "Iceland", "flag": "🇮🇸"},
    ],
    "players": [
        # Japan: five approved players, so the median seed gets a bye
        {"$id": "jp-1", "name": "Haruki Sato", "rating": 2410, "countryId": "japan", "status": "approved"},
        {"$id": "jp-2", "name": "Aoi Tanaka", "rating": 2285, "countryId": "japan", "status": "approved"},
        {"$id": "jp-3", "name": "Ren Suzuki", "rating": 2150, "countryId": "japan", "status": "approved"},
        {"$id": "jp-4", "name": "Yui Watanabe", "rating": 1990, "countryId": "japan", "status": "approved"},
        {"$id": "jp-5", "name": "Sota Ito", "rating": 1820, "countryId": "japan", "status": "approved"},
        {"$id": "jp-6", "name": "Mei Kobayashi", "rating": 2050, "countryId": "japan", "status": "pending"},
        # Brazil: four approved players, one rejected registration
        {"$id": "br-1", "name": "Lucas Silva", "rating": 2600, "countryId": "brazil", "status": "approved"},
        {"$id": "br-2", "name": "Ana Costa", "rating": 2480, "countryId": "brazil", "status": "approved"},
        {"$id": "br-3", "name": "Pedro Santos", "rating": 2300, "countryId": "brazil", "status": "approved"},
        {"$id": "br-4", "name": "Julia Rocha", "rating": 2300, "countryId": "brazil", "status": "approved"},
        {"$id": "br-5", "name": "Rafael Lima", "rating": 1700, "countryId": "brazil", "status": "rejected"},
        # Iceland: not enough approved players to seed
        {"$id": "is-1", "name": "Einar Magnusson", "rating": 2350, "countryId": "iceland", "status": "approved"},
        {"$id": "is-2", "name": "Katrin Jonsdottir", "rating": 2100, "countryId": "iceland", "status": "pending"},
    ],
}
