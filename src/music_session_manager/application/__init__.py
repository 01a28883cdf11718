"""
Application Layer

Contains use cases, command/query handlers, and application services.
This layer orchestrates domain objects and infrastructure to fulfill use cases.

Structure:
- commands/: CQRS write operations and the CommandDispatcher facade
- queries/: CQRS read operations (GetQueueQuery, GetCurrentTrackQuery)
- services/: PlaybackDriver and SessionRegistry
- interfaces/: Port interfaces for infrastructure adapters
"""
