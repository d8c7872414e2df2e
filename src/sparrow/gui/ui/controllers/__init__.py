"""Controllers coordinating the edit session with background workers."""

from .render_controller import RenderController

__all__ = ["RenderController"]
