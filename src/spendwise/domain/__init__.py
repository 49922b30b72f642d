"""Domain layer: persistence contracts the engine's callers depend on."""
