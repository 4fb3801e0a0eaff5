"""Front-ends that drive the OperationFacade (currently: console REPL)."""
