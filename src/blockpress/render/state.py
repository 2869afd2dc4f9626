"""Interaction state owned by the renderer's caller: accordion, lightbox, carousels, scroll lock"""

import time
from dataclasses import dataclass, field
from typing import Callable

from blockpress.core.utils.logging import get_logger


logger = get_logger(__name__)


class ScrollLock:
    """Document-level scroll lock. Not reentrant: only one lightbox may hold it."""

    def __init__(self):
        self.locked = False

    def lock(self) -> None:
        self.locked = True

    def unlock(self) -> None:
        self.locked = False


@dataclass(frozen=True)
class LightboxImage:
    url: str
    caption: str | None = None
    alt: str | None = None


class Lightbox:
    """Single open/closed lightbox; holds the selected image, or a gallery list plus index."""

    def __init__(self, scroll_lock: ScrollLock | None = None):
        self.scroll_lock = scroll_lock or ScrollLock()
        self.images: list[LightboxImage] = []
        self.index: int | None = None

    @property
    def is_open(self) -> bool:
        return self.index is not None

    @property
    def current(self) -> LightboxImage | None:
        return self.images[self.index] if self.is_open else None

    def open(self, url: str, caption: str | None = None, alt: str | None = None) -> None:
        self.open_gallery([LightboxImage(url, caption, alt)], 0)

    def open_gallery(self, images: list[LightboxImage], index: int = 0) -> None:
        """Open on images[index]; an already-open lightbox just changes selection."""
        if not images:
            return
        if not self.is_open:
            self.scroll_lock.lock()
        self.images = list(images)
        self.index = index % len(self.images)
        logger.debug("lightbox_open", url=self.images[self.index].url)

    def close(self) -> None:
        if self.is_open:
            self.scroll_lock.unlock()
        self.images = []
        self.index = None

    def next(self) -> None:
        if self.is_open and len(self.images) > 1:
            self.index = (self.index + 1) % len(self.images)

    def previous(self) -> None:
        if self.is_open and len(self.images) > 1:
            self.index = (self.index - 1) % len(self.images)

    def handle_key(self, key: str) -> None:
        """Escape closes; arrow keys step through gallery images with wraparound."""
        if key == 'Escape':
            self.close()
        elif key == 'ArrowLeft':
            self.previous()
        elif key == 'ArrowRight':
            self.next()


class AccordionState:
    """One globally open accordion item; opening one closes any other."""

    def __init__(self):
        self.open_item: tuple[str, int] | None = None

    def toggle(self, block_id: str, index: int) -> None:
        key = (block_id, index)
        self.open_item = None if self.open_item == key else key

    def is_open(self, block_id: str, index: int) -> bool:
        return self.open_item == (block_id, index)


class Carousel:
    """Slide index with wraparound, timed auto-advance, and an is-animating guard."""

    AUTO_ADVANCE_SECONDS = 5.0
    TRANSITION_SECONDS = 0.5

    def __init__(
        self,
        count: int,
        interval: float = AUTO_ADVANCE_SECONDS,
        transition: float = TRANSITION_SECONDS,
        clock: Callable[[], float] = time.monotonic,
        ):
        self.count = count
        self.interval = interval
        self.transition = transition
        self._clock = clock
        self.index = 0
        self._animating_until = 0.0
        self._last_move = clock()

    @property
    def is_animating(self) -> bool:
        return self._clock() < self._animating_until

    def go_to(self, index: int) -> bool:
        """Move to index (wrapped). Ignored while a transition is still running."""
        if self.count == 0 or self.is_animating:
            return False
        now = self._clock()
        self.index = index % self.count
        self._animating_until = now + self.transition
        self._last_move = now
        return True

    def next(self) -> bool:
        return self.go_to(self.index + 1)

    def previous(self) -> bool:
        return self.go_to(self.index - 1)

    def tick(self) -> bool:
        """Advance once the interval has elapsed since the last move."""
        if self.count > 1 and self._clock() - self._last_move >= self.interval:
            return self.next()
        return False


@dataclass
class ViewState:
    """Everything interactive about one rendered article."""
    accordion: AccordionState = field(default_factory=AccordionState)
    lightbox: Lightbox = field(default_factory=Lightbox)
    carousels: dict[str, Carousel] = field(default_factory=dict)

    def carousel(self, block_id: str, count: int) -> Carousel:
        if block_id not in self.carousels:
            self.carousels[block_id] = Carousel(count)
        return self.carousels[block_id]
