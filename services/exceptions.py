"""
Service-layer errors.

They subclass ValueError so callers that only care about "bad input"
can keep catching ValueError; routers map each one to an HTTP status.
"""


class EntityNotFoundError(ValueError):
     """A referenced row does not exist."""

     def __init__(self, entity: str, entity_id):
          self.entity = entity
          self.entity_id = entity_id
          super().__init__(f"{entity} with ID {entity_id} not found")


class DeletionBlockedError(ValueError):
     """A row cannot be deleted while dependent rows exist."""

     def __init__(self, entity: str, entity_id, dependents: dict[str, int]):
          self.entity = entity
          self.entity_id = entity_id
          self.dependents = dependents
          blocking = ", ".join(f"{count} {label}" for label, count in dependents.items())
          super().__init__(f"Cannot delete {entity} {entity_id}: {blocking} still depend on it")


class BusinessRuleError(ValueError):
     """The request is well-formed but conflicts with the current state."""
