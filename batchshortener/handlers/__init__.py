from batchshortener.handlers.shorten_urls import shorten_urls, BatchResult, BatchStatus
from batchshortener.handlers.simulate_click import simulate_click, ClickResult, ClickStatus
from batchshortener.handlers.statistics import collect_statistics, StatisticsSummary, LinkStatistics


__all__ = [
    'shorten_urls',
    'BatchResult',
    'BatchStatus',
    'simulate_click',
    'ClickResult',
    'ClickStatus',
    'collect_statistics',
    'StatisticsSummary',
    'LinkStatistics',
]
