"""
kubectl-tekton - Tekton Results from the command line

A kubectl plugin that queries a Tekton Results server for PipelineRun and
TaskRun records and their logs.

Architecture:
- Each module is self-contained with clear interfaces
- Modules talk to each other only through their package exports
- The REST transport stands in for a generated RPC client

Modules:
- models: Typed request/response messages and their field role tables
- transport: Query projection, path building and the HTTP exchange
- client: Results/Records/Logs capability groups and pagination
- resolver: Resource alias resolution and API version compatibility
- action: Filter building, record listing and log lookup for the CLI
"""

__version__ = "0.3.0"
