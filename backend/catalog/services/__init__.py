from .naming import NamingService
from .workflow import StatusWorkflowService
from .catalog_store import CatalogStore
from .storage import B2StorageClient, AuthorizationCache, get_storage_client, reset_storage_client
from .uploads import UploadService

__all__ = [
    'NamingService',
    'StatusWorkflowService',
    'CatalogStore',
    'B2StorageClient',
    'AuthorizationCache',
    'get_storage_client',
    'reset_storage_client',
    'UploadService',
]
