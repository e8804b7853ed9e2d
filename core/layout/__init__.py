"""
Book page layout and composition for Folio.

Provides the layout configuration and its sub-editors, pagination of a
manuscript into a page sequence, freeform image placement, two-page spread
navigation, undo/redo history and autosave.
"""

from .models import (
    Background,
    BackgroundKind,
    Chapter,
    DocumentState,
    GradientFill,
    GradientStop,
    HeaderFooterConfig,
    HeaderFooterContent,
    HeaderFooterStyle,
    ImageFill,
    ImagePlacement,
    LayoutConfiguration,
    Manuscript,
    Margins,
    Page,
    PageNumberPosition,
    PageRole,
    PaginationFlags,
    PatternFill,
    SplitType,
    Typography,
    default_layout,
)
from .errors import LayoutError, PersistenceError, TemplateError
from .history import HistoryManager
from .pagination import generate_pages, role_sequence
from .canvas import CanvasEditor, InteractionSession
from .spreads import Spread, SpreadNavigator, spread_count
from .header_footer import BandRenderer, PageContext, apply_preset
from .templates import TemplateManager, TemplateMetadata, TemplateValidator, ValidationError
from .design import BookDesign, DesignSelection, merge_design
from .document import LayoutSession
from .autosave import AutosaveCoordinator, SaveResult, SaveStatus
from .persistence import JsonProjectStore
from .preview import SpreadPreviewGenerator

__all__ = [
    # Data models
    "Background",
    "BackgroundKind",
    "Chapter",
    "DocumentState",
    "GradientFill",
    "GradientStop",
    "HeaderFooterConfig",
    "HeaderFooterContent",
    "HeaderFooterStyle",
    "ImageFill",
    "ImagePlacement",
    "LayoutConfiguration",
    "Manuscript",
    "Margins",
    "Page",
    "PageNumberPosition",
    "PageRole",
    "PaginationFlags",
    "PatternFill",
    "SplitType",
    "Typography",
    "default_layout",
    # Errors
    "LayoutError",
    "PersistenceError",
    "TemplateError",
    # Editing
    "HistoryManager",
    "generate_pages",
    "role_sequence",
    "CanvasEditor",
    "InteractionSession",
    "Spread",
    "SpreadNavigator",
    "spread_count",
    "BandRenderer",
    "PageContext",
    "apply_preset",
    "LayoutSession",
    # Templates and design
    "TemplateManager",
    "TemplateMetadata",
    "TemplateValidator",
    "ValidationError",
    "BookDesign",
    "DesignSelection",
    "merge_design",
    # Saving and preview
    "AutosaveCoordinator",
    "SaveResult",
    "SaveStatus",
    "JsonProjectStore",
    "SpreadPreviewGenerator",
]
