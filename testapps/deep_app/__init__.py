from ext_app import ExtApp


class DeepApp(ExtApp):
    pass
