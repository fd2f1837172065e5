from batchshortener.dao.memory.short_url_memory_dao import ShortURLMemoryDAO


__all__ = [
    'ShortURLMemoryDAO',
]
