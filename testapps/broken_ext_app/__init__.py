from broken_base_app import BrokenBaseApp
from virtualcomponents import VirtualComponents


class BrokenExtApp(VirtualComponents, BrokenBaseApp):
    pass
