"""Key dispatch for interactive drivers.

Maps discrete key presses onto :class:`~pomodorotracker.session.Session`
events. Which keys do what depends on the current :class:`View`: while a
pause is being annotated every printable key becomes part of the note.
"""
from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from .session import RemainingTime, Session

logger = logging.getLogger(__name__)

BACKSPACE = "\b"
ENTER = "\n"


class View(Enum):
    NORMAL = "normal"
    ANNOTATION = "annotation"
    INTERRUPTIONS = "interruptions"


class Controller:
    def __init__(self, session: Session) -> None:
        self.session = session
        self.view = View.NORMAL

    def handle_key(self, key: str, now: Optional[float] = None) -> bool:
        """Apply one key press. Returns False once the user asked to quit."""
        if now is None:
            now = self.session.now()

        if self.view is View.ANNOTATION:
            if key == ENTER:
                self.view = View.NORMAL
            elif key == BACKSPACE:
                self.session.pop_annotation_char()
            elif key.isprintable() and len(key) == 1:
                self.session.append_annotation_char(key)
            return True

        if self.view is View.INTERRUPTIONS:
            self.view = View.NORMAL
            return True

        if key == "q":
            return False
        if key == "c":
            self.session.finish_current_cycle(now)
        elif key == " ":
            self.session.toggle_timer(now)
            if self.session.is_paused():
                self.view = View.ANNOTATION
        elif key == "i":
            self.view = View.INTERRUPTIONS
        else:
            logger.debug(f"Ignoring key {key!r} in {self.view.value} view")
        return True

    def tick(self, now: Optional[float] = None) -> RemainingTime:
        """Query the timer and move on to the next stage once it is due."""
        if now is None:
            now = self.session.now()
        remaining = self.session.remaining_time(now)
        if remaining.is_due:
            self.session.finish_current_cycle(now)
            if self.view is View.ANNOTATION:
                self.view = View.NORMAL
        return remaining
