"""
Tests for the payments app.

Modules:
- test_state_transitions.py: Payment/Escrow/Dispute FSM transitions
- test_escrow_service.py: hold, release and refund against a mock gateway
- test_dispute_service.py: raising and resolving disputes
- test_views.py: history and dispute endpoints
"""
