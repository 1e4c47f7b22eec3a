from virtualcomponents import Controller, action


class Root(Controller):

    @action("hello")
    async def hello(self):
        return {"greeting": f"hello from {self.app.__name__}", "component": self.component_name}

    @action("about")
    async def about(self):
        return {"name": self.app.get_config().get("name")}
