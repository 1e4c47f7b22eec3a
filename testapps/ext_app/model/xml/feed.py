from virtualcomponents import Model


class Feed(Model):
    config = {"url": "http://example.com/feed.xml"}
