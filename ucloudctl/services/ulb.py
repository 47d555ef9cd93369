"""ULB (load balancer) actions."""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Literal, TypeAlias

from ucloudctl.utils import format_date

from .types import ULBIPSet, ULBRow, ULBSet

if TYPE_CHECKING:
    from ucloudctl.api.client import ApiClient

ULBMode: TypeAlias = Literal["outer", "inner"]


@dataclass(frozen=True, slots=True)
class ULB:
    id: str
    name: str = ""
    group: str = ""
    ulb_type: str = ""
    private_ip: str = ""
    vpc_id: str = ""
    subnet_id: str = ""
    create_time: int = 0
    ip_set: tuple[ULBIPSet, ...] = ()

    @classmethod
    def from_api(cls, data: ULBSet) -> ULB:
        return cls(
            id=data["ULBId"],
            name=data.get("Name", ""),
            group=data.get("Tag", ""),
            ulb_type=data.get("ULBType", ""),
            private_ip=data.get("PrivateIP", ""),
            vpc_id=data.get("VPCId", ""),
            subnet_id=data.get("SubnetId", ""),
            create_time=data.get("CreateTime", 0),
            ip_set=tuple(data.get("IPSet", [])),
        )

    def to_row(self) -> ULBRow:
        ips = [ip.get("EIP", "") for ip in self.ip_set if ip.get("EIP")]
        if self.private_ip:
            ips.append(self.private_ip)
        return ULBRow(
            ResourceID=self.id,
            Name=self.name,
            Network="Intranet" if self.ulb_type == "InnerMode" else "Internet",
            IP=",".join(ips),
            Group=self.group,
            CreationTime=format_date(self.create_time) if self.create_time else "",
        )


async def describe_ulbs(
    client: ApiClient,
    *,
    ulb_id: str | None = None,
    vpc_id: str | None = None,
    subnet_id: str | None = None,
    region: str | None = None,
    project_id: str | None = None,
    offset: int | None = None,
    limit: int | None = None,
) -> list[ULB]:
    resp = await client.invoke(
        "DescribeULB",
        {
            "Region": region,
            "ProjectId": project_id,
            "ULBId": ulb_id,
            "VPCId": vpc_id,
            "SubnetId": subnet_id,
            "Offset": offset,
            "Limit": limit,
        },
    )
    return [ULB.from_api(item) for item in resp.get("DataSet") or []]


async def create_ulb(
    client: ApiClient,
    *,
    name: str,
    mode: ULBMode = "outer",
    vpc_id: str | None = None,
    subnet_id: str | None = None,
    tag: str | None = None,
    charge_type: str | None = None,
    region: str | None = None,
    project_id: str | None = None,
) -> str:
    """Create a load balancer and return its id."""
    match mode:
        case "outer":
            mode_params = {"OuterMode": "Yes"}
        case "inner":
            mode_params = {"InnerMode": "Yes"}
        case _:
            raise ValueError(f"Unknown ULB mode {mode!r}, expected 'outer' or 'inner'")

    resp = await client.invoke(
        "CreateULB",
        {
            "Region": region,
            "ProjectId": project_id,
            "ULBName": name,
            "Tag": tag,
            "VPCId": vpc_id,
            "SubnetId": subnet_id,
            "ChargeType": charge_type,
            **mode_params,
        },
    )
    return str(resp.get("ULBId", ""))


async def delete_ulb(
    client: ApiClient,
    ulb_id: str,
    *,
    region: str | None = None,
    project_id: str | None = None,
) -> None:
    await client.invoke("DeleteULB", {"Region": region, "ProjectId": project_id, "ULBId": ulb_id})
