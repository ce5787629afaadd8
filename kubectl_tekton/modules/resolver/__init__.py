"""
Resolver Module - Black Box Interface

Purpose: Turn resource aliases into fully qualified group/version/kind
Interface: ResourceResolver.resolve(), GroupVersionKind
Hidden: Alias table, qualifier parsing, version compatibility policy

Can be replaced with a discovery-backed RESTMapper.
"""

from .resolver import DEFAULT_RESOURCES, GroupVersionKind, ResourceResolver, ResourceType

__all__ = ["DEFAULT_RESOURCES", "GroupVersionKind", "ResourceResolver", "ResourceType"]
