# Issues ranking requests and feeds successful responses into the selection coordinator.

import logging

from api_adapters import RankingApiAdapter, RankingRequestError
from api_structures import Coordinates, Preferences, ResponseMeta, SuggestionRequest
from selection import SelectionCoordinator

logger = logging.getLogger(__name__)

DEFAULT_START = "48.137154,11.576124"
DEFAULT_END = "48.370545,10.897790"


def parse_latlon(text: str) -> Coordinates | None:
    """Parses 'lat,lon'. Returns None if the text is not a valid position."""
    parts = text.split(",")
    if len(parts) != 2:
        return None
    try:
        lat = float(parts[0].strip())
        lon = float(parts[1].strip())
    except ValueError:
        return None
    if not (-90.0 <= lat <= 90.0 and -180.0 <= lon <= 180.0):
        return None
    return Coordinates(lat=lat, lon=lon)


class RequestPanel:
    """
    Owns the request inputs' outcome: the last response meta and the
    user-visible error. A failed request never touches the current
    suggestions or selection. Only one request may be in flight.
    """

    def __init__(self, adapter: RankingApiAdapter, coordinator: SelectionCoordinator):
        self.adapter = adapter
        self.coordinator = coordinator
        self.error: str | None = None
        self.meta: ResponseMeta | None = None
        self.has_response = False
        self.pending = False

    def submit(self, start: str, end: str, max_suggestions: int = 3,
               preferences: Preferences | None = None) -> bool:
        """Returns True when a new suggestion set was applied."""
        if self.pending:
            logger.warning("A ranking request is already pending; ignoring resubmission")
            return False

        if parse_latlon(start) is None:
            self.error = "Start must be 'lat,lon'"
            return False
        if parse_latlon(end) is None:
            self.error = "End must be 'lat,lon'"
            return False

        request = SuggestionRequest(
            start=start.strip(),
            end=end.strip(),
            max_suggestions=max_suggestions,
            preferences=preferences or Preferences(),
        )

        self.pending = True
        self.error = None
        try:
            response = self.adapter.get_suggestions(request)
        except RankingRequestError as e:
            self.error = str(e) or "Unknown network error"
            return False
        finally:
            self.pending = False

        self.meta = response.meta
        self.has_response = True
        self.coordinator.set_suggestions(response.suggestions)
        return True
