"""
Regex fragments shared by the marketplace URLconfs.

Path ids are matched loosely and parsed by the services, so a malformed
id gets the JSON 404 body instead of Django's HTML page.
"""

PATH_ID_PATTERN = r"[^/]+"
