from virtualcomponents import Model


class First(Model):
    pass


class Second(Model):
    pass
