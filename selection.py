# Holds the single "active suggestion" shared by the chip strip, the card list and the map.

import logging
from typing import Callable, Iterable

from api_structures import Suggestion

logger = logging.getLogger(__name__)

# Listeners receive (suggestions, active_id) after every change.
Listener = Callable[[tuple[Suggestion, ...], str | None], None]


class SelectionCoordinator:
    """
    Two states: Empty (no suggestions, no active id) and Selected
    (active id names a current suggestion). select() is the only way
    a surface changes the active id; set_suggestions() is the only way
    a new response enters.
    """

    def __init__(self):
        self._suggestions: tuple[Suggestion, ...] = ()
        self._active_id: str | None = None
        self._listeners: list[Listener] = []

    # --- Read access ---

    @property
    def suggestions(self) -> tuple[Suggestion, ...]:
        return self._suggestions

    @property
    def active_id(self) -> str | None:
        return self._active_id

    @property
    def active_suggestion(self) -> Suggestion | None:
        for suggestion in self._suggestions:
            if suggestion.id == self._active_id:
                return suggestion
        return None

    def is_active(self, suggestion_id: str) -> bool:
        return self._active_id is not None and suggestion_id == self._active_id

    # --- Mutation ---

    def set_suggestions(self, suggestions: Iterable[Suggestion]) -> None:
        """Replaces the whole set; the first suggestion becomes active."""
        self._suggestions = tuple(suggestions)
        self._active_id = self._suggestions[0].id if self._suggestions else None
        logger.debug("Suggestion set replaced (%d item(s)), active=%s",
                     len(self._suggestions), self._active_id)
        self._notify()

    def select(self, suggestion_id: str) -> bool:
        """
        Makes suggestion_id active. Ids outside the current set are
        stale intents and are ignored. Returns True if the id changed.
        """
        if not any(s.id == suggestion_id for s in self._suggestions):
            logger.debug("Ignoring selection of unknown suggestion %r", suggestion_id)
            return False
        if suggestion_id == self._active_id:
            return False
        self._active_id = suggestion_id
        logger.debug("Active suggestion is now %s", suggestion_id)
        self._notify()
        return True

    # --- Observers ---

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Registers listener and returns a function that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        for listener in list(self._listeners):
            listener(self._suggestions, self._active_id)
