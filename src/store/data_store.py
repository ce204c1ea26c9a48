"""Read-only access to mock resources and directory objects."""

from dataclasses import dataclass
from typing import Iterable, Optional

from models.config import ResourceGroup, User, VirtualMachine
from store.principals import PrincipalDirectory, ServicePrincipal


@dataclass(frozen=True)
class Statistics:
    """Counters shown by the statistics endpoint."""

    total_vms: int
    running_vms: int
    stopped_vms: int
    total_users: int


class DataStore:
    """Data the response mappers render.

    All collections are tuples created once; lookups are plain scans, the
    mock deals with tens of records, not thousands.
    """

    def __init__(
        self,
        resource_groups: Iterable[ResourceGroup],
        vms: Iterable[VirtualMachine],
        users: Iterable[User],
        principals: PrincipalDirectory,
    ) -> None:
        """Initialize the store.

        Parameters:
            resource_groups: Resource groups in configuration order.
            vms: Virtual machines in configuration order.
            users: Directory users in configuration order.
            principals: Service principal directory (without secrets).
        """
        self._resource_groups = tuple(resource_groups)
        self._vms = tuple(vms)
        self._users = tuple(users)
        self._principals = principals

    def resource_groups(self) -> tuple[ResourceGroup, ...]:
        """Return all resource groups."""
        return self._resource_groups

    def find_resource_group(self, name: str) -> Optional[ResourceGroup]:
        """Return resource group with given name (case-insensitive)."""
        name = name.lower()
        for group in self._resource_groups:
            if group.name.lower() == name:
                return group
        return None

    def vms(self, resource_group: Optional[str] = None) -> tuple[VirtualMachine, ...]:
        """Return virtual machines, optionally only those from one group."""
        if not resource_group:
            return self._vms
        resource_group = resource_group.lower()
        return tuple(
            vm for vm in self._vms if vm.resource_group.lower() == resource_group
        )

    def find_vm(
        self, name: str, resource_group: Optional[str] = None
    ) -> Optional[VirtualMachine]:
        """Return virtual machine with given name, optionally in given group."""
        for vm in self.vms(resource_group):
            if vm.name == name:
                return vm
        return None

    def users(self) -> tuple[User, ...]:
        """Return all directory users."""
        return self._users

    def find_user(self, key: str) -> Optional[User]:
        """Find user by object id first, then by user principal name."""
        for user in self._users:
            if user.id == key:
                return user
        key = key.lower()
        for user in self._users:
            if user.user_principal_name.lower() == key:
                return user
        return None

    def service_principals(self) -> tuple[ServicePrincipal, ...]:
        """Return all service principals."""
        return self._principals.all()

    def find_service_principal(self, key: str) -> Optional[ServicePrincipal]:
        """Find service principal by object id first, then by application id."""
        return self._principals.find(key)

    def statistics(self) -> Statistics:
        """Count virtual machines by status and users."""
        running = sum(1 for vm in self._vms if vm.status == "running")
        return Statistics(
            total_vms=len(self._vms),
            running_vms=running,
            stopped_vms=len(self._vms) - running,
            total_users=len(self._users),
        )
