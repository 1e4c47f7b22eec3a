import fragile_missing_dependency  # noqa: F401

from virtualcomponents import Model


class Broken(Model):
    pass
