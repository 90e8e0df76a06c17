from .config import ClientConfig as ClientConfig
from .entity_client import EntityClient as EntityClient
