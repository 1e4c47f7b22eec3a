from virtualcomponents import Model


class DBIC(Model):
    config = {"schema_class": "BaseSchema"}

    def connect_info(self):
        return self.config.get("dsn")


class ResultSet(Model):
    """Declared next to DBIC; registered as an inner component."""
