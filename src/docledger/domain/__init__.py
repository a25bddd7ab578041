"""Domain layer: entities, value objects, state machine and rules."""
