from .virtual_components import VirtualComponents, make_virtual_component

__all__ = ["VirtualComponents", "make_virtual_component"]
