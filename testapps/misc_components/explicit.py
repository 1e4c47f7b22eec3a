from virtualcomponents import Model


class Helper(Model):
    pass


class Storage(Model):
    pass


__component__ = Storage
