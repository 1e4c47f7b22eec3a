from virtualcomponents import Application


class BrokenBaseApp(Application):
    pass
