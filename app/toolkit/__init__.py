"""
Toolkit - shared services used across apps.

Key components:
    - services/email.py: EmailService (template email via Django mail)

Usage:
    from toolkit.services import EmailService

Note:
    - This app has no models.
    - For model-layer patterns and the exception hierarchy, see core/.
"""
