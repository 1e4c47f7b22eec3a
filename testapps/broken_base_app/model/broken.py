from virtualcomponents import Model


class Broken(Model):
    pass
