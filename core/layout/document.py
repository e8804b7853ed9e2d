"""
Layout editing session.

Ties the pieces together for one book: the layout configuration, the
generated pages with their image placements, the spread cursor and the
undo history. Every completed user action becomes exactly one history
entry. Drag and resize gestures update the live canvas on every pointer
move but are recorded once, when the gesture ends.
"""

from dataclasses import replace
from typing import Any, Callable, Dict, List, Optional, Sequence

from core.constants import HISTORY_LIMIT
from core.logging_config import LogManager

from . import background as background_ops
from . import configuration as config_ops
from . import pagination
from .canvas import CanvasEditor, Point, Size
from .design import BookDesign, DesignMergeResult, DesignSelection, ImageSuggestion, merge_design, placement_for_suggestion
from .header_footer import BandRenderer, PageContext, apply_preset_to_layout
from .history import HistoryManager
from .models import (
    Background,
    DocumentState,
    ImagePlacement,
    LayoutConfiguration,
    Manuscript,
    Page,
    PageRole,
    PaginationFlags,
    default_layout,
)
from .spreads import Spread, SpreadNavigator
from .templates import TemplateManager

logger = LogManager().get_logger("layout.document")


def _carry_images(old_pages: Sequence[Page], new_pages: Sequence[Page]) -> List[Page]:
    """Keep image placements of pages that survive a regeneration."""
    images_by_id = {page.id: page.images for page in old_pages if page.images}
    return [
        replace(page, images=images_by_id[page.id]) if page.id in images_by_id else page
        for page in new_pages
    ]


class LayoutSession:
    """
    Editable layout document for one manuscript.

    Args:
        manuscript: Book content the pages are generated from
        configuration: Starting configuration (default profile if omitted)
        flags: Table of contents / back cover switches
        pages: Existing pages (e.g. from a saved project); generated if omitted
        history_limit: Maximum undo depth
        template_manager: Source for named templates
    """

    def __init__(
        self,
        manuscript: Manuscript,
        configuration: Optional[LayoutConfiguration] = None,
        flags: Optional[PaginationFlags] = None,
        pages: Optional[Sequence[Page]] = None,
        history_limit: int = HISTORY_LIMIT,
        template_manager: Optional[TemplateManager] = None,
    ):
        self.manuscript = manuscript
        flags = flags or PaginationFlags()
        if pages is None:
            pages = pagination.generate_pages(manuscript, flags)
        initial = DocumentState(
            configuration=configuration or default_layout(),
            pages=tuple(pages),
            flags=flags,
        )
        self.history: HistoryManager[DocumentState] = HistoryManager(initial, max_size=history_limit)
        self.canvas = CanvasEditor(initial.pages)
        self.navigator = SpreadNavigator(initial.pages, is_rtl=initial.configuration.is_rtl)
        self.templates = template_manager
        self.renderer = BandRenderer()
        self._listeners: List[Callable[[], None]] = []

    @classmethod
    def from_state(cls, manuscript: Manuscript, state: DocumentState, **kwargs) -> "LayoutSession":
        return cls(manuscript, configuration=state.configuration, flags=state.flags, pages=state.pages, **kwargs)

    # State access

    @property
    def state(self) -> DocumentState:
        return self.history.current

    @property
    def configuration(self) -> LayoutConfiguration:
        return self.state.configuration

    @property
    def pages(self) -> tuple:
        """Pages as currently displayed, including an in-progress gesture."""
        return self.canvas.pages

    @property
    def flags(self) -> PaginationFlags:
        return self.state.flags

    def add_listener(self, callback: Callable[[], None]) -> None:
        """Register a callback run after every change, undo and redo."""
        self._listeners.append(callback)

    def _changed(self) -> None:
        for callback in list(self._listeners):
            callback()

    def _sync(self) -> None:
        state = self.state
        self.canvas.set_pages(state.pages)
        self.navigator.is_rtl = state.configuration.is_rtl
        self.navigator.set_pages(state.pages)

    def _push(self, state: DocumentState) -> bool:
        if state == self.state:
            return False
        self.history.push(state)
        self._sync()
        self._changed()
        return True

    # Configuration editing

    def update_configuration(self, operation: Callable[..., LayoutConfiguration], *args, **kwargs) -> bool:
        """Apply ``operation(configuration, *args, **kwargs)`` as one undoable step."""
        self._finish_gesture()
        new_config = operation(self.configuration, *args, **kwargs)
        return self._push(replace(self.state, configuration=new_config))

    def set_layout(self, configuration: LayoutConfiguration) -> bool:
        self._finish_gesture()
        return self._push(replace(self.state, configuration=config_ops.normalize(configuration)))

    def update_layout(self, **changes: Any) -> bool:
        return self.update_configuration(config_ops.update_layout, **changes)

    def set_columns(self, columns: int) -> bool:
        return self.update_configuration(config_ops.set_columns, columns)

    def set_column_gap(self, gap: float) -> bool:
        return self.update_configuration(config_ops.set_column_gap, gap)

    def set_split_type(self, split_type, ratio=None) -> bool:
        return self.update_configuration(config_ops.set_split_type, split_type, ratio)

    def set_split_ratio(self, first: float) -> bool:
        return self.update_configuration(config_ops.set_split_ratio, first)

    def set_header(self, header) -> bool:
        return self.update_configuration(config_ops.set_header, header)

    def set_footer(self, footer) -> bool:
        return self.update_configuration(config_ops.set_footer, footer)

    def set_background(self, background: Background) -> bool:
        return self.update_configuration(config_ops.set_background, background)

    def edit_background(self, operation: Callable[..., Background], *args, **kwargs) -> bool:
        """Run a background sub-editor operation, e.g. ``add_gradient_stop``."""
        new_background = operation(self.configuration.background, *args, **kwargs)
        return self.set_background(new_background)

    def switch_background_kind(self, kind) -> bool:
        return self.edit_background(background_ops.switch_kind, kind)

    def set_margins(self, margins) -> bool:
        return self.update_configuration(config_ops.set_margins, margins)

    def set_typography(self, typography) -> bool:
        return self.update_configuration(config_ops.set_typography, typography)

    def set_rtl(self, is_rtl: bool) -> bool:
        return self.update_configuration(config_ops.set_rtl, is_rtl)

    def set_page_numbers(self, show: bool, position=None) -> bool:
        return self.update_configuration(config_ops.set_page_numbers, show, position)

    def apply_header_footer_preset(self, preset_name: str) -> bool:
        return self.update_configuration(apply_preset_to_layout, preset_name)

    def reset_layout(self) -> bool:
        """Restore the default profile as a normal, undoable change."""
        return self.set_layout(config_ops.reset_layout())

    def apply_template(self, key: str) -> bool:
        """
        Replace the configuration with a named template.

        Raises:
            TemplateError: unknown template
        """
        if self.templates is None:
            self.templates = TemplateManager()
        configuration = self.templates.build_configuration(key)
        logger.info(f"Applying template '{key}'")
        return self.set_layout(configuration)

    def apply_design(
        self,
        design: BookDesign,
        selection: DesignSelection = DesignSelection(),
        cover_image_url: Optional[str] = None,
    ) -> DesignMergeResult:
        result = merge_design(self.configuration, design, selection, cover_image_url)
        self.set_layout(result.configuration)
        return result

    # Page list editing

    def _set_pages(self, pages: Sequence[Page], flags: Optional[PaginationFlags] = None) -> bool:
        state = replace(self.state, pages=tuple(pages))
        if flags is not None:
            state = replace(state, flags=flags)
        return self._push(state)

    def regenerate_pages(self) -> bool:
        self._finish_gesture()
        pages = pagination.generate_pages(self.manuscript, self.flags)
        return self._set_pages(_carry_images(self.state.pages, pages))

    def insert_blank_page(self, after_index: int) -> bool:
        self._finish_gesture()
        return self._set_pages(pagination.insert_blank_page(self.state.pages, after_index))

    def remove_page(self, index: int) -> bool:
        """Remove a blank page. Returns False when nothing was removed."""
        self._finish_gesture()
        return self._set_pages(pagination.remove_page(self.state.pages, index))

    def toggle_table_of_contents(self) -> bool:
        self._finish_gesture()
        flags, pages = pagination.toggle_table_of_contents(self.manuscript, self.flags)
        return self._set_pages(_carry_images(self.state.pages, pages), flags)

    def toggle_back_cover(self) -> bool:
        self._finish_gesture()
        flags, pages = pagination.toggle_back_cover(self.manuscript, self.flags)
        return self._set_pages(_carry_images(self.state.pages, pages), flags)

    # Canvas

    def _commit_canvas(self) -> bool:
        return self._set_pages(self.canvas.pages)

    def add_image(self, page_index: int, url: str, **geometry: float) -> Optional[ImagePlacement]:
        placement = self.canvas.add_image(page_index, url, **geometry)
        if placement is not None:
            self._commit_canvas()
        return placement

    def update_image(self, page_index: int, image_id: str, **changes: float) -> Optional[ImagePlacement]:
        placement = self.canvas.update_image(page_index, image_id, **changes)
        if placement is not None:
            self._commit_canvas()
        return placement

    def rotate_image(self, page_index: int, image_id: str, rotation: float) -> Optional[ImagePlacement]:
        placement = self.canvas.rotate_image(page_index, image_id, rotation)
        if placement is not None:
            self._commit_canvas()
        return placement

    def delete_image(self, page_index: int, image_id: str) -> bool:
        if not self.canvas.delete_image(page_index, image_id):
            return False
        return self._commit_canvas()

    def select_image(self, page_index: int, image_id: Optional[str]) -> None:
        self.canvas.select_image(page_index, image_id)

    def begin_drag(self, page_index: int, image_id: str, pointer: Point):
        self._finish_gesture()
        return self.canvas.begin_drag(page_index, image_id, pointer)

    def begin_resize(self, page_index: int, image_id: str, pointer: Point):
        self._finish_gesture()
        return self.canvas.begin_resize(page_index, image_id, pointer)

    def move_pointer(self, pointer: Point, container: Size) -> Optional[ImagePlacement]:
        return self.canvas.move_pointer(pointer, container)

    def end_gesture(self) -> bool:
        """Release the pointer. Records one history entry if anything moved."""
        return self._finish_gesture()

    def _finish_gesture(self) -> bool:
        session = self.canvas.end_session()
        if session is None or not self.canvas.session_changed(session):
            return False
        return self._commit_canvas()

    def place_suggested_image(self, suggestion: ImageSuggestion, url: str) -> Optional[ImagePlacement]:
        """Add an image generated for a design suggestion to its chapter page."""
        page_index = pagination.chapter_page_index(self.state.pages, suggestion.chapter_index)
        if page_index < 0:
            logger.warning(f"No page for chapter {suggestion.chapter_index}, suggestion not placed")
            return None
        placement = placement_for_suggestion(suggestion, url)
        return self.add_image(
            page_index, url,
            image_id=placement.id,
            x=placement.x, y=placement.y, width=placement.width, height=placement.height,
        )

    # History

    def undo(self) -> bool:
        """Undo the last step. A gesture still in progress is recorded first."""
        self._finish_gesture()
        if self.history.undo() is None:
            return False
        self._sync()
        self._changed()
        return True

    def redo(self) -> bool:
        self._finish_gesture()
        if self.history.redo() is None:
            return False
        self._sync()
        self._changed()
        return True

    def can_undo(self) -> bool:
        return self.history.can_undo()

    def can_redo(self) -> bool:
        return self.history.can_redo()

    def is_dirty(self) -> bool:
        return self.history.is_dirty()

    def mark_saved(self, snapshot: Optional[DocumentState] = None) -> None:
        self.history.commit(snapshot)

    # Viewing

    def go_to_spread(self, cursor: int) -> int:
        return self.navigator.go_to(cursor)

    def next_spread(self) -> int:
        return self.navigator.next()

    def previous_spread(self) -> int:
        return self.navigator.previous()

    def on_arrow_key(self, key: str) -> int:
        return self.navigator.on_arrow_key(key)

    def spread_count(self) -> int:
        return self.navigator.count

    def _chapter_title_for(self, page_index: int) -> str:
        """Title of the chapter a page belongs to (last chapter opened before it)."""
        pages = self.pages
        for index in range(min(page_index, len(pages) - 1), -1, -1):
            page = pages[index]
            if page.role == PageRole.CHAPTER_BODY and page.chapter_index is not None:
                if 0 <= page.chapter_index < len(self.manuscript.chapters):
                    return self.manuscript.chapters[page.chapter_index].title
                return ""
        return ""

    def page_context(self, page_index: int) -> PageContext:
        return PageContext(
            page_number=page_index + 1,
            total_pages=len(self.pages),
            title=self.manuscript.title,
            chapter=self._chapter_title_for(page_index),
            author=self.manuscript.author,
        )

    def _page_view(self, page: Optional[Page], index: Optional[int]) -> Optional[Dict[str, Any]]:
        if page is None:
            return None
        view: Dict[str, Any] = {
            "index": index,
            "role": page.role.value,
            "content": page.content,
            "images": [image.to_dict() for image in page.images],
            "header": None,
            "footer": None,
        }
        if index is not None:
            context = self.page_context(index)
            header = self.renderer.render_if_visible(self.configuration.header, context)
            footer = self.renderer.render_if_visible(self.configuration.footer, context)
            view["header"] = header.to_dict() if header else None
            view["footer"] = footer.to_dict() if footer else None
        return view

    def current_spread(self) -> Spread:
        return self.navigator.current()

    def render_model(self, cursor: Optional[int] = None) -> Dict[str, Any]:
        """
        Everything a viewer needs to draw one spread.

        Args:
            cursor: Spread to describe (default: the navigator's cursor)

        Returns:
            Dictionary with the spread label, both physical page slots and
            the active configuration
        """
        spread = self.navigator.get_spread(cursor)
        return {
            "cursor": spread.cursor,
            "label": self.navigator.label(spread.cursor),
            "isCover": spread.is_cover,
            "isRTL": spread.is_rtl,
            "left": self._page_view(spread.left, spread.left_index),
            "right": self._page_view(spread.right, spread.right_index),
            "configuration": self.configuration.to_dict(),
            "dirty": self.is_dirty(),
            "canUndo": self.can_undo(),
            "canRedo": self.can_redo(),
        }
