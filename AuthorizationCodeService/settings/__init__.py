"""
Settings for the authorization code service.

``base`` holds everything shared, including the ``LICENSING`` block and
the Celery beat schedule for the session sweep; ``dev``, ``test`` and
``prod`` override the database, logging and Celery delivery per
environment.
"""
