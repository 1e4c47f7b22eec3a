from virtualcomponents import Model


class Cache(Model):
    config = {"backend": "memory"}
