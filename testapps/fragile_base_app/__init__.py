from virtualcomponents import Application


class FragileBaseApp(Application):
    pass
