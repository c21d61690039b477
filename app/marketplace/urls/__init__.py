"""
URL configurations for the marketplace app.

Each marketplace has its own module, included by config.urls:
    - flight_companion.py  -> /api/flightcompanion/
    - pickup.py            -> /api/pickup/
    - ratings.py           -> /api/ratings/ (shared by both marketplaces)
"""
