"""
Freeform image placement on pages.

Geometry lives in percent of the page box so it is independent of the
on-screen zoom. A pointer gesture is converted with
``delta% = delta_px / container_px * 100`` and applied to the geometry the
image had when the gesture started, never cumulatively, so a gesture cannot
drift. All results are clamped so an image never leaves its page:

* drag: ``0 <= x <= 100 - width`` (same for y/height)
* resize: ``MIN_IMAGE_SIZE <= width <= 100 - x`` (same for height/y)
"""

import uuid
from dataclasses import dataclass, replace
from enum import Enum
from typing import List, Optional, Sequence, Tuple

from core.constants import MIN_IMAGE_SIZE
from core.logging_config import LogManager

from .models import ImagePlacement, Page, clamp

logger = LogManager().get_logger("layout.canvas")

Point = Tuple[float, float]  # (x, y) in pixels
Size = Tuple[float, float]  # (width, height) in pixels


class InteractionKind(str, Enum):
    DRAG = "drag"
    RESIZE = "resize"


@dataclass(frozen=True)
class InteractionSession:
    """An in-progress drag or resize, anchored at its starting state."""

    kind: InteractionKind
    page_index: int
    image_id: str
    anchor_pointer: Point
    anchor_geometry: ImagePlacement


def clamp_placement(placement: ImagePlacement) -> ImagePlacement:
    """Force ``placement`` back inside the page box."""
    width = clamp(placement.width, MIN_IMAGE_SIZE, 100.0)
    height = clamp(placement.height, MIN_IMAGE_SIZE, 100.0)
    return replace(
        placement,
        width=width,
        height=height,
        x=clamp(placement.x, 0.0, 100.0 - width),
        y=clamp(placement.y, 0.0, 100.0 - height),
    )


def pointer_delta_percent(anchor: Point, pointer: Point, container: Size) -> Tuple[float, float]:
    """Convert a pixel pointer offset into percent of the container."""
    width, height = container
    if width <= 0 or height <= 0:
        logger.warning(f"Ignoring pointer move over empty container {container}")
        return 0.0, 0.0
    dx = (pointer[0] - anchor[0]) / width * 100.0
    dy = (pointer[1] - anchor[1]) / height * 100.0
    return dx, dy


def apply_drag(session: InteractionSession, pointer: Point, container: Size) -> ImagePlacement:
    dx, dy = pointer_delta_percent(session.anchor_pointer, pointer, container)
    start = session.anchor_geometry
    return replace(
        start,
        x=clamp(start.x + dx, 0.0, 100.0 - start.width),
        y=clamp(start.y + dy, 0.0, 100.0 - start.height),
    )


def apply_resize(session: InteractionSession, pointer: Point, container: Size) -> ImagePlacement:
    dx, dy = pointer_delta_percent(session.anchor_pointer, pointer, container)
    start = session.anchor_geometry
    return replace(
        start,
        width=clamp(start.width + dx, MIN_IMAGE_SIZE, 100.0 - start.x),
        height=clamp(start.height + dy, MIN_IMAGE_SIZE, 100.0 - start.y),
    )


def new_image_id() -> str:
    return f"img-{uuid.uuid4().hex[:12]}"


class CanvasEditor:
    """
    Image placement state for a page list, plus selection and the active
    pointer gesture.

    At most one drag/resize session exists at a time. Starting a session
    ends the previous one, and ``end_session`` always clears it. Operations
    on one image never touch its siblings.
    """

    def __init__(self, pages: Sequence[Page] = ()):
        self.pages: Tuple[Page, ...] = tuple(pages)
        self.selected: Optional[Tuple[int, str]] = None
        self.session: Optional[InteractionSession] = None

    # Lookup helpers

    def _page(self, page_index: int) -> Optional[Page]:
        if 0 <= page_index < len(self.pages):
            return self.pages[page_index]
        logger.warning(f"Page index {page_index} out of range")
        return None

    def get_image(self, page_index: int, image_id: str) -> Optional[ImagePlacement]:
        page = self._page(page_index)
        if page is None:
            return None
        image = page.find_image(image_id)
        if image is None:
            logger.warning(f"Image {image_id} not found on page {page_index}")
        return image

    def _replace_images(self, page_index: int, images: List[ImagePlacement]) -> None:
        page = self.pages[page_index]
        pages = list(self.pages)
        pages[page_index] = replace(page, images=tuple(images))
        self.pages = tuple(pages)

    def _put_image(self, page_index: int, placement: ImagePlacement) -> None:
        images = [placement if img.id == placement.id else img for img in self.pages[page_index].images]
        self._replace_images(page_index, images)

    def set_pages(self, pages: Sequence[Page]) -> None:
        """Load a new page list (e.g. after undo), dropping stale state."""
        self.pages = tuple(pages)
        self.session = None
        if self.selected is not None:
            page_index, image_id = self.selected
            if not (0 <= page_index < len(self.pages) and self.pages[page_index].find_image(image_id)):
                self.selected = None

    # Image operations

    def add_image(
        self,
        page_index: int,
        url: str,
        image_id: Optional[str] = None,
        **geometry: float,
    ) -> Optional[ImagePlacement]:
        """
        Place a new image on a page.

        Args:
            page_index: Target page
            url: Image location from the image source
            image_id: Optional explicit id
            **geometry: Optional x/y/width/height/rotation overrides

        Returns:
            The clamped placement, or None for an unknown page
        """
        page = self._page(page_index)
        if page is None:
            return None
        placement = clamp_placement(ImagePlacement(id=image_id or new_image_id(), url=url, **geometry))
        self._replace_images(page_index, list(page.images) + [placement])
        logger.info(f"Added image {placement.id} to page {page_index}")
        return placement

    def update_image(self, page_index: int, image_id: str, **changes: float) -> Optional[ImagePlacement]:
        image = self.get_image(page_index, image_id)
        if image is None:
            return None
        placement = clamp_placement(replace(image, **changes))
        self._put_image(page_index, placement)
        return placement

    def rotate_image(self, page_index: int, image_id: str, rotation: float) -> Optional[ImagePlacement]:
        image = self.get_image(page_index, image_id)
        if image is None:
            return None
        placement = replace(image, rotation=float(rotation))
        self._put_image(page_index, placement)
        return placement

    def delete_image(self, page_index: int, image_id: str) -> bool:
        image = self.get_image(page_index, image_id)
        if image is None:
            return False
        if self.session and self.session.page_index == page_index and self.session.image_id == image_id:
            self.session = None
        self._replace_images(page_index, [img for img in self.pages[page_index].images if img.id != image_id])
        if self.selected == (page_index, image_id):
            self.selected = None
        logger.info(f"Deleted image {image_id} from page {page_index}")
        return True

    def select_image(self, page_index: int, image_id: Optional[str]) -> None:
        if image_id is None:
            self.selected = None
            return
        if self.get_image(page_index, image_id) is not None:
            self.selected = (page_index, image_id)

    # Pointer gestures

    def _begin(self, kind: InteractionKind, page_index: int, image_id: str, pointer: Point) -> Optional[InteractionSession]:
        if self.session is not None:
            self.end_session()
        image = self.get_image(page_index, image_id)
        if image is None:
            return None
        self.session = InteractionSession(
            kind=kind,
            page_index=page_index,
            image_id=image_id,
            anchor_pointer=(float(pointer[0]), float(pointer[1])),
            anchor_geometry=image,
        )
        self.selected = (page_index, image_id)
        return self.session

    def begin_drag(self, page_index: int, image_id: str, pointer: Point) -> Optional[InteractionSession]:
        return self._begin(InteractionKind.DRAG, page_index, image_id, pointer)

    def begin_resize(self, page_index: int, image_id: str, pointer: Point) -> Optional[InteractionSession]:
        return self._begin(InteractionKind.RESIZE, page_index, image_id, pointer)

    def move_pointer(self, pointer: Point, container: Size) -> Optional[ImagePlacement]:
        """Apply the active gesture for a pointer position; no-op when idle."""
        session = self.session
        if session is None:
            return None
        if session.kind == InteractionKind.DRAG:
            placement = apply_drag(session, pointer, container)
        else:
            placement = apply_resize(session, pointer, container)
        self._put_image(session.page_index, placement)
        return placement

    def end_session(self) -> Optional[InteractionSession]:
        """Finish the active gesture. Returns it so callers can compare."""
        session, self.session = self.session, None
        return session

    def session_changed(self, session: InteractionSession) -> bool:
        """True if the gesture moved its image away from the anchor geometry."""
        page = self._page(session.page_index)
        if page is None:
            return False
        current = page.find_image(session.image_id)
        return current is not None and current != session.anchor_geometry
