"""
Catalog app configuration.

Prepares the data directory and reports missing storage credentials on
startup.
"""

import logging
from django.apps import AppConfig

logger = logging.getLogger(__name__)


class CatalogConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'catalog'

    def ready(self):
        """
        Create the data directory and warn when B2 is not configured.

        The credential check only runs for the serving process, not for
        management commands.
        """
        import sys
        from pathlib import Path
        from django.conf import settings

        data_dir = Path(getattr(settings, 'CATALOG_DATA_DIR', settings.BASE_DIR / 'data'))
        data_dir.mkdir(parents=True, exist_ok=True)

        if 'runserver' in sys.argv or 'gunicorn' in sys.argv[0]:
            from catalog.services import get_storage_client

            client = get_storage_client()
            if client.is_configured:
                logger.info(f"Storage bucket {client.bucket_name} configured")
            else:
                logger.warning(
                    "B2 credentials are not configured; uploads will fail. "
                    "Set B2_ACCOUNT_ID, B2_APPLICATION_KEY and B2_BUCKET_ID."
                )
