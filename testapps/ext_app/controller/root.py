from base_app.controller.root import Root as BaseRoot
from virtualcomponents import action


class Root(BaseRoot):

    @action("new_action")
    async def new_action(self):
        return {"action": "new", "component": self.component_name}
