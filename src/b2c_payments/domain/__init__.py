"""Domain layer - Core business logic, entities, and rules.

This layer contains:
- Entities: Objects with identity and lifecycle (e.g., Transaction)
- Value Objects: Immutable objects defined by their attributes (e.g., PhoneNumber)
- Domain Exceptions: Validation, external-service and payment errors

The domain layer has NO dependencies on external frameworks or infrastructure.
"""
