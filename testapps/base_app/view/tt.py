from virtualcomponents import View


class TT(View):

    def render(self, template, context):
        return template.format(**context)
