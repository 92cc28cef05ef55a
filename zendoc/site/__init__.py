"""Documentation site assembly."""

from .astro import SiteAssembler, SiteError

__all__ = ["SiteAssembler", "SiteError"]
