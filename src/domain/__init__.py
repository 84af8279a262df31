"""Domain layer - Pure business logic.

Session lifecycle entities, value objects, protocols (ports) and the
session validator. The domain layer has NO dependencies on any framework
or infrastructure.

Structure:
- entities/: Session, RememberMeToken
- value_objects/: RequestContext, SessionPolicy, storage reports
- enums/: Verdicts, login types, IP policy, write consistency
- errors/: StorageUnavailableError
- protocols/: Store, cache, repository, clock and logger ports
- validators/: SessionValidator
"""
