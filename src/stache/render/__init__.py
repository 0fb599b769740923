"""Template rendering - context, resolution, transforms and the renderer."""

from stache.render.context import RenderContext, SequenceContext
from stache.render.renderer import Renderer
from stache.render.resolver import Resolver

__all__ = ["RenderContext", "SequenceContext", "Renderer", "Resolver"]
