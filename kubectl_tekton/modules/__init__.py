"""
kubectl-tekton Modules - Black Box Architecture

Each module is a self-contained black box with:
- Clear interface (public API)
- Hidden implementation details
- Single responsibility

Dependency order: models -> transport -> client -> action.
The resolver is consumed by action and the command layer only.
"""
