"""Resource APIs built on the core dispatcher."""

from __future__ import annotations

from .base import PageOptions, QueryOptions, Representation, ResourceApi
from .clients import ClientQuery, ClientsApi
from .groups import GroupMembersQuery, GroupQuery, GroupsApi
from .identity_providers import IdentityProviderQuery, IdentityProvidersApi
from .organizations import OrganizationMembersQuery, OrganizationQuery, OrganizationsApi
from .realms import RealmsApi
from .role_mappings import RoleMappingsApi, RoleMappingsFactory
from .roles import RoleQuery, RolesApi
from .users import UserGroupsQuery, UserQuery, UsersApi

__all__ = [
    "ClientQuery",
    "ClientsApi",
    "GroupMembersQuery",
    "GroupQuery",
    "GroupsApi",
    "IdentityProviderQuery",
    "IdentityProvidersApi",
    "OrganizationMembersQuery",
    "OrganizationQuery",
    "OrganizationsApi",
    "PageOptions",
    "QueryOptions",
    "RealmsApi",
    "Representation",
    "ResourceApi",
    "RoleMappingsApi",
    "RoleMappingsFactory",
    "RoleQuery",
    "RolesApi",
    "UserGroupsQuery",
    "UserQuery",
    "UsersApi",
]
