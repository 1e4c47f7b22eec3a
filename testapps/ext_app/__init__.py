from base_app import BaseApp
from virtualcomponents import VirtualComponents


class ExtApp(VirtualComponents, BaseApp):
    config = {
        "name": "Extended",
        "model.dbic": {"pool_size": 5},
        "setup_components": {"search_extra": [".plugin"]},
    }
