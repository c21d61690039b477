# Load the Celery app with Django so shared_task decorators in the
# marketplace app bind to it and autodiscovery finds marketplace.tasks.
from config.celery import app as celery_app

__all__ = ("celery_app",)
