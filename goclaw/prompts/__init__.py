"""Prompt and document templates."""

from .template_renderer import render_template

__all__ = ["render_template"]
