"""Application layer - Session lifecycle use cases.

Structure:
- dtos/: Result dataclasses handed to the presentation layer
- services/: SessionService facade and RememberMeTokenManager

The application layer orchestrates the store, validator and token manager;
it depends only on domain protocols, never on infrastructure.
"""
