from virtualcomponents import Application


class BaseApp(Application):
    config = {
        "name": "Base",
        "model.dbic": {"dsn": "sqlite:///base.db", "pool_size": 1},
    }
