from fragile_base_app import FragileBaseApp
from virtualcomponents import VirtualComponents


class FragileExtApp(VirtualComponents, FragileBaseApp):
    pass
