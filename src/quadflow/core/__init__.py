"""
Core wiring.

- ports.py: Protocols for collaborators (persistence, event listeners)
- events.py: in-process pub/sub for "state changed" notifications
- facade.py: OperationFacade, the only entry point collaborators use
- state.py: AppState bundling settings + facade + collaborators
"""
