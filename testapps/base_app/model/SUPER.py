# Alias module; its name marks it as a super-class alias, not a component.
from base_app.model.dbic import DBIC as SUPER  # noqa: F401
