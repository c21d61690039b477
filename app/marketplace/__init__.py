"""
Marketplace app - flight companion and airport pickup requests and offers.

Travelers post requests, helpers post offers. A traveler picks one of the
matching offers; the match is confirmed atomically together with a
Payment whose funds are held in escrow until the service is completed.

Key components:
    - models/: FlightCompanionRequest/Offer, PickupRequest/Offer
    - services/matching.py: Candidate offers for a request, cheapest first
    - services/match_confirmation.py: Request + offer + payment in one transaction
    - services/completion.py: Release escrow when the service is delivered
    - services/listings.py: Request/offer creation, edits and search
    - tasks.py: Match and completion emails (Celery)
"""
