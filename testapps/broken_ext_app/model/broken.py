import definitely_missing_dependency  # noqa: F401

from broken_base_app.model.broken import Broken as BaseBroken


class Broken(BaseBroken):
    pass
