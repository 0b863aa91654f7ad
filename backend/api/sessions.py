"""
In-memory registry of open screens.

Screens live only as long as the process; nothing is persisted.
"""
import logging
from typing import Dict

from services.location_selector import LocationSelector
from services.report_view import ReportRenderer
from settings import settings

logger = logging.getLogger(__name__)

# In-memory storage
selectors_db: Dict[str, LocationSelector] = {}
results_db: Dict[str, ReportRenderer] = {}


def register_result(result_id: str, renderer: ReportRenderer) -> None:
    """Store a results screen, closing the oldest ones beyond MAX_OPEN_RESULTS."""
    results_db[result_id] = renderer
    while len(results_db) > max(settings.MAX_OPEN_RESULTS, 1):
        oldest_id = next(iter(results_db))
        logger.info("Evicting results screen %s", oldest_id)
        results_db.pop(oldest_id).close()


def discard_result(result_id: str) -> bool:
    renderer = results_db.pop(result_id, None)
    if renderer is None:
        return False
    renderer.close()
    return True
