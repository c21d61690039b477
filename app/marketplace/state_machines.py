"""
State enums for marketplace requests.

Request State:
    open → matched → completed
                   ↘ cancelled

The open → matched step is performed by a conditional UPDATE in
MatchConfirmationService (not by an FSM method) so that two concurrent
confirmations cannot both succeed. matched → completed (escrow released)
and matched → cancelled (escrow refunded after a dispute) are django-fsm
transitions on the model.
"""

from django.db import models


class RequestState(models.TextChoices):
    """
    States for a traveler's request.

    Terminal states: COMPLETED, CANCELLED
    """

    OPEN = "open", "Open"
    MATCHED = "matched", "Matched"
    COMPLETED = "completed", "Completed"
    CANCELLED = "cancelled", "Cancelled"
