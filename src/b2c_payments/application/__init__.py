"""Application layer - Use cases and port definitions.

This layer contains:
- Use Cases: Payment orchestration (initiate, status lookup, provider updates)
- Ports: Abstract interfaces for external dependencies
- Provider Registry: Tag-to-adapter mapping built at startup
- Notifications: Recipient message rendering and delivery
- DTOs: Data transfer objects for use case input

The application layer depends only on the domain layer.
Infrastructure implementations are injected via ports.
"""
