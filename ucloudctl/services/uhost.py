"""UHost (cloud server) actions.

Thin wrappers marshalling one action each, plus the describer the poller uses
to wait for instance state transitions.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

from loguru import logger

from ucloudctl.utils import format_date

from .types import IPSet, UHostInstanceSet, UHostRow

if TYPE_CHECKING:
    from ucloudctl.api.client import ApiClient
    from ucloudctl.wait.poller import Describer

log = logger.bind(component="uhost")

# =============================================================================
# States
# =============================================================================

INITIALIZING = "Initializing"
STARTING = "Starting"
RUNNING = "Running"
STOPPING = "Stopping"
STOPPED = "Stopped"
INSTALL_FAIL = "Install Fail"
REBOOTING = "Rebooting"

PENDING_STATES: tuple[str, ...] = (INITIALIZING, STARTING, STOPPING, REBOOTING)


# =============================================================================
# Model
# =============================================================================


@dataclass(frozen=True, slots=True)
class UHostInstance:
    """A UHost as returned by DescribeUHostInstance."""

    id: str
    name: str = ""
    zone: str = ""
    state: str = ""
    group: str = ""
    cpu: int = 0
    memory_mb: int = 0
    gpu: int = 0
    image: str = ""
    host_type: str = ""
    create_time: int = 0
    ip_set: tuple[IPSet, ...] = field(default=())

    @classmethod
    def from_api(cls, data: UHostInstanceSet) -> UHostInstance:
        return cls(
            id=data["UHostId"],
            name=data.get("Name", ""),
            zone=data.get("Zone", ""),
            state=data.get("State", ""),
            group=data.get("Tag", ""),
            cpu=data.get("CPU", 0),
            memory_mb=data.get("Memory", 0),
            gpu=data.get("GPU", 0),
            image=data.get("BasicImageName") or data.get("OsName", ""),
            host_type=data.get("MachineType") or data.get("UHostType", ""),
            create_time=data.get("CreateTime", 0),
            ip_set=tuple(data.get("IPSet", [])),
        )

    def current_state(self) -> str:
        return self.state

    @property
    def private_ips(self) -> list[str]:
        return [ip.get("IP", "") for ip in self.ip_set if ip.get("Type") == "Private"]

    @property
    def public_ips(self) -> list[str]:
        return [ip.get("IP", "") for ip in self.ip_set if ip.get("Type") != "Private"]

    def to_row(self) -> UHostRow:
        config = f"cpu:{self.cpu} memory:{self.memory_mb // 1024}G"
        if self.gpu:
            config += f" gpu:{self.gpu}"
        return UHostRow(
            ResourceID=self.id,
            Name=self.name,
            Group=self.group,
            PrivateIP=",".join(self.private_ips),
            PublicIP=",".join(self.public_ips),
            Config=config,
            Image=self.image,
            Type=self.host_type,
            State=self.state,
            CreationTime=format_date(self.create_time) if self.create_time else "",
        )


# =============================================================================
# Actions
# =============================================================================


def _scope(region: str | None, zone: str | None, project_id: str | None) -> dict[str, Any]:
    return {"Region": region, "Zone": zone, "ProjectId": project_id}


async def describe_uhost_instances(
    client: ApiClient,
    *,
    uhost_ids: list[str] | None = None,
    region: str | None = None,
    zone: str | None = None,
    project_id: str | None = None,
    tag: str | None = None,
    offset: int | None = None,
    limit: int | None = None,
) -> list[UHostInstance]:
    resp = await client.invoke(
        "DescribeUHostInstance",
        {
            **_scope(region, zone, project_id),
            "UHostIds": uhost_ids,
            "Tag": tag,
            "Offset": offset,
            "Limit": limit,
        },
    )
    return [UHostInstance.from_api(item) for item in resp.get("UHostSet") or []]


async def create_uhost_instance(
    client: ApiClient,
    *,
    image_id: str,
    password: str,
    cpu: int = 1,
    memory_mb: int = 1024,
    name: str = "UHost",
    boot_disk_type: str = "CLOUD_SSD",
    boot_disk_size_gb: int = 20,
    charge_type: str = "Month",
    region: str | None = None,
    zone: str | None = None,
    project_id: str | None = None,
    tag: str | None = None,
) -> list[str]:
    """Create one instance and return the new UHost ids."""
    resp = await client.invoke(
        "CreateUHostInstance",
        {
            **_scope(region, zone, project_id),
            "ImageId": image_id,
            "LoginMode": "Password",
            "Password": base64.b64encode(password.encode("utf-8")).decode("ascii"),
            "CPU": cpu,
            "Memory": memory_mb,
            "Name": name,
            "Tag": tag,
            "ChargeType": charge_type,
            "Disks": [{"IsBoot": "True", "Type": boot_disk_type, "Size": boot_disk_size_gb}],
        },
    )
    ids = list(resp.get("UHostIds") or [])
    log.info("Created {ids}", ids=ids)
    return ids


async def _instance_action(
    client: ApiClient,
    action: str,
    uhost_id: str,
    *,
    region: str | None = None,
    zone: str | None = None,
    project_id: str | None = None,
    **extra: Any,
) -> str:
    resp = await client.invoke(action, {**_scope(region, zone, project_id), "UHostId": uhost_id, **extra})
    return str(resp.get("UHostId") or uhost_id)


async def start_uhost_instance(client: ApiClient, uhost_id: str, **scope: Any) -> str:
    return await _instance_action(client, "StartUHostInstance", uhost_id, **scope)


async def stop_uhost_instance(client: ApiClient, uhost_id: str, **scope: Any) -> str:
    return await _instance_action(client, "StopUHostInstance", uhost_id, **scope)


async def reboot_uhost_instance(client: ApiClient, uhost_id: str, **scope: Any) -> str:
    return await _instance_action(client, "RebootUHostInstance", uhost_id, **scope)


async def terminate_uhost_instance(
    client: ApiClient,
    uhost_id: str,
    *,
    release_eip: bool = True,
    release_udisk: bool = True,
    **scope: Any,
) -> str:
    return await _instance_action(
        client,
        "TerminateUHostInstance",
        uhost_id,
        ReleaseEIP=release_eip,
        ReleaseUDisk=release_udisk,
        **scope,
    )


# =============================================================================
# Describer
# =============================================================================


def uhost_describer(client: ApiClient) -> Describer:
    """Build a describer fetching one UHost by id (None while it is not listed)."""

    async def describe(
        resource_id: str, project_id: str, region: str, zone: str
    ) -> UHostInstance | None:
        instances = await describe_uhost_instances(
            client,
            uhost_ids=[resource_id],
            region=region or None,
            zone=zone or None,
            project_id=project_id or None,
        )
        return instances[0] if instances else None

    return describe
