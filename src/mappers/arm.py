"""Responses of the resource-management (ARM) API.

The sub-resource kind is classified from the lower-cased path pattern:
operation status polling, virtual machines, resource groups and the static
operations catalogue, checked in that order. Payloads follow the ARM
nesting `{id, name, type, location, tags, properties}`.
"""

from typing import Any, Optional

import constants
from log import get_logger
from mappers.types import ResourceNotFoundError, UnsupportedOperationError
from models.config import ResourceGroup, VirtualMachine
from routes.pattern import split_path
from store.data_store import DataStore

logger = get_logger(__name__)

OPERATIONS_CATALOGUE = (
    "Microsoft.Resources/ResourceGroups/read",
    "Microsoft.Resources/ResourceGroups/write",
    "Microsoft.Compute/virtualMachines/read",
    "Microsoft.Compute/virtualMachines/write",
)


def resolve_action(path_pattern: str, operation_id: str) -> Optional[str]:
    """Return lower-cased VM action (`start`, `poweroff`, ...) of POST request.

    The last segment of the path pattern is checked first, then the part of
    the operation id that follows the last underscore, as in
    `VirtualMachines_PowerOff`.
    """
    segments = split_path(path_pattern)
    candidates = [segments[-1] if segments else "", operation_id.rsplit("_", 1)[-1]]
    for candidate in candidates:
        action = candidate.lower()
        if action in constants.ARM_ACTION_VERBS:
            return action
    return None


def subscription_of(params: dict[str, str]) -> str:
    """Return subscription id from request parameters."""
    return params.get("subscriptionId") or constants.ARM_DEFAULT_SUBSCRIPTION


def resource_group_id(subscription: str, name: str) -> str:
    """Build ARM id of resource group."""
    return f"/subscriptions/{subscription}/resourceGroups/{name}"


def vm_id(subscription: str, resource_group: str, name: str) -> str:
    """Build ARM id of virtual machine."""
    return (
        f"{resource_group_id(subscription, resource_group)}"
        f"/providers/{constants.ARM_VIRTUAL_MACHINE_TYPE}/{name}"
    )


def power_state_code(status: str) -> str:
    """Derive power-state code of instance view from internal VM status.

    Examples:
        >>> power_state_code("stopped")
        'PowerState/deallocated'
        >>> power_state_code("running")
        'PowerState/running'
    """
    if status == "stopped":
        return "PowerState/deallocated"
    return f"PowerState/{status or 'unknown'}"


def instance_view(vm: VirtualMachine) -> dict[str, Any]:
    """Render instance view of virtual machine."""
    return {
        "statuses": [
            {
                "code": f"ProvisioningState/{vm.provisioning_state}",
                "level": "Info",
                "displayStatus": f"Provisioning {vm.provisioning_state.lower()}",
            },
            {
                "code": power_state_code(vm.status),
                "level": "Info",
                "displayStatus": vm.power_state,
            },
        ]
    }


def render_vm(
    vm: VirtualMachine, subscription: str, expand_instance_view: bool
) -> dict[str, Any]:
    """Render virtual machine in ARM format.

    Parameters:
        vm: The virtual machine.
        subscription: Subscription used when the VM has no full ARM id.
        expand_instance_view: Include `properties.instanceView`.
    """
    resource_id = vm.id
    if "/resourcegroups/" not in resource_id.lower():
        resource_id = vm_id(subscription, vm.resource_group, vm.name)

    properties: dict[str, Any] = {
        "vmId": vm.id or resource_id,
        "provisioningState": vm.provisioning_state,
        "hardwareProfile": {"vmSize": vm.vm_size},
        "storageProfile": {"osDisk": {"osType": vm.os_type}},
    }
    if expand_instance_view:
        properties["instanceView"] = instance_view(vm)

    return {
        "id": resource_id,
        "name": vm.name,
        "type": constants.ARM_VIRTUAL_MACHINE_TYPE,
        "location": vm.location,
        "tags": dict(vm.tags),
        "properties": properties,
    }


def render_resource_group(group: ResourceGroup, subscription: str) -> dict[str, Any]:
    """Render resource group in ARM format."""
    resource_id = group.id
    if "/resourcegroups/" not in resource_id.lower():
        resource_id = resource_group_id(subscription, group.name)
    return {
        "id": resource_id,
        "name": group.name,
        "type": constants.ARM_RESOURCE_GROUP_TYPE,
        "location": group.location,
        "tags": dict(group.tags),
        "properties": {"provisioningState": "Succeeded"},
    }


def map_arm_operation_status(operation_id: str, params: dict[str, str]) -> dict[str, Any]:
    """Answer polling of long-running operation.

    No operation of the mock takes time, so every operation has already
    succeeded.
    """
    logger.debug("Operation status polled via %s", operation_id)
    return {"status": "Succeeded", "id": params.get("operationId", "")}


def map_arm_response(
    operation_id: str,
    path_pattern: str,
    method: str,
    params: dict[str, str],
    data: DataStore,
) -> Any:
    """Render response of resource-management operation.

    Parameters:
        operation_id: Operation id of the matched route.
        path_pattern: Path pattern of the matched route.
        method: HTTP method.
        params: Merged path and query parameters.
        data: Read-only mock data.

    Returns:
        Any: JSON-serializable payload, None for responses without body.

    Raises:
        ResourceNotFoundError: If the addressed resource does not exist.
        UnsupportedOperationError: If the method is not emulated.
    """
    pattern = path_pattern.lower()
    method = method.upper()

    if "/operations/" in pattern and method == "GET":
        return map_arm_operation_status(operation_id, params)
    if "virtualmachines" in pattern:
        return _map_virtual_machines(operation_id, path_pattern, method, params, data)
    if "resourcegroups" in pattern:
        return _map_resource_groups(method, params, data)
    if "/operations" in pattern:
        return {"value": [{"name": name} for name in OPERATIONS_CATALOGUE]}
    return {"value": []}


def _map_resource_groups(method: str, params: dict[str, str], data: DataStore) -> Any:
    subscription = subscription_of(params)
    name = params.get("resourceGroupName", "")

    match method:
        case "GET":
            if name:
                group = data.find_resource_group(name)
                if group is None:
                    raise ResourceNotFoundError(f"resource group not found: {name}")
                return render_resource_group(group, subscription)
            return {
                "value": [
                    render_resource_group(group, subscription)
                    for group in data.resource_groups()
                ]
            }
        case "PUT" | "PATCH" | "POST":
            existing = data.find_resource_group(name) if name else None
            return {
                "id": resource_group_id(subscription, name),
                "name": name,
                "type": constants.ARM_RESOURCE_GROUP_TYPE,
                "location": params.get("location")
                or (existing.location if existing else ""),
                "properties": {"provisioningState": "Succeeded"},
            }
        case "DELETE":
            return None
        case _:
            raise UnsupportedOperationError(f"unsupported method: {method}")


def _map_virtual_machines(
    operation_id: str,
    path_pattern: str,
    method: str,
    params: dict[str, str],
    data: DataStore,
) -> Any:
    subscription = subscription_of(params)
    name = params.get("vmName", "")
    group = params.get("resourceGroupName") or None
    expand = params.get("$expand", "").lower() == constants.INSTANCE_VIEW_EXPAND.lower()

    match method:
        case "GET":
            if not name:
                return {
                    "value": [
                        render_vm(vm, subscription, expand) for vm in data.vms(group)
                    ]
                }
            vm = _find_vm(data, name, group)
            if path_pattern.lower().endswith("/instanceview"):
                return instance_view(vm)
            return render_vm(vm, subscription, expand)
        case "POST":
            action = resolve_action(path_pattern, operation_id)
            if action is not None:
                _find_vm(data, name, group)
                logger.debug("Action %s on VM %s succeeded", action, name)
                return {"status": "Succeeded"}
            return _created_vm(subscription, group or "", name, params)
        case "PUT" | "PATCH":
            return _created_vm(subscription, group or "", name, params)
        case "DELETE":
            _find_vm(data, name, group)
            return None
        case _:
            raise UnsupportedOperationError(f"unsupported method: {method}")


def _find_vm(data: DataStore, name: str, group: Optional[str]) -> VirtualMachine:
    vm = data.find_vm(name, group)
    if vm is None:
        raise ResourceNotFoundError(f"virtual machine not found: {name}")
    return vm


def _created_vm(
    subscription: str, group: str, name: str, params: dict[str, str]
) -> dict[str, Any]:
    return {
        "id": vm_id(subscription, group, name),
        "name": name,
        "type": constants.ARM_VIRTUAL_MACHINE_TYPE,
        "location": params.get("location", ""),
        "properties": {"provisioningState": "Succeeded"},
    }
