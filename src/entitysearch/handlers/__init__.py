from .search_handler import EntitySearchHandler as EntitySearchHandler
