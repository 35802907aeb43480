"""Infrastructure: dependency wiring."""

from .container import Container, get_container, init_container, reset_container

__all__ = ["Container", "get_container", "init_container", "reset_container"]
