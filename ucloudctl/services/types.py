"""UCloud API response and row types.

TypedDicts for API responses - no conversion needed beyond the models in
``uhost``/``ulb``. Row types use the column names shown in tables.
"""

from __future__ import annotations

from typing import NotRequired, TypedDict

# =============================================================================
# Response Types
# =============================================================================


class IPSet(TypedDict):
    Type: NotRequired[str]  # Private, BGP, International, ...
    IP: NotRequired[str]
    IPId: NotRequired[str]
    Bandwidth: NotRequired[int]


class UHostInstanceSet(TypedDict):
    UHostId: str
    Zone: NotRequired[str]
    Name: NotRequired[str]
    Tag: NotRequired[str]
    State: NotRequired[str]  # Initializing, Starting, Running, Stopping, Stopped, Install Fail, Rebooting
    CPU: NotRequired[int]
    Memory: NotRequired[int]  # MB
    GPU: NotRequired[int]
    OsName: NotRequired[str]
    BasicImageName: NotRequired[str]
    UHostType: NotRequired[str]
    MachineType: NotRequired[str]
    ChargeType: NotRequired[str]
    CreateTime: NotRequired[int]
    ExpireTime: NotRequired[int]
    IPSet: NotRequired[list[IPSet]]


class ULBIPSet(TypedDict):
    EIP: NotRequired[str]
    EIPId: NotRequired[str]
    OperatorName: NotRequired[str]
    Bandwidth: NotRequired[int]


class ULBSet(TypedDict):
    ULBId: str
    Name: NotRequired[str]
    Tag: NotRequired[str]
    Remark: NotRequired[str]
    ULBType: NotRequired[str]  # OuterMode, InnerMode
    PrivateIP: NotRequired[str]
    VPCId: NotRequired[str]
    SubnetId: NotRequired[str]
    CreateTime: NotRequired[int]
    IPSet: NotRequired[list[ULBIPSet]]


# =============================================================================
# Table Rows
# =============================================================================


class UHostRow(TypedDict):
    ResourceID: str
    Name: str
    Group: str
    PrivateIP: str
    PublicIP: str
    Config: str
    Image: str
    Type: str
    State: str
    CreationTime: str


class ULBRow(TypedDict):
    ResourceID: str
    Name: str
    Network: str
    IP: str
    Group: str
    CreationTime: str


class RegionRow(TypedDict):
    Region: str
    Label: str
