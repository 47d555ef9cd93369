"""Hand-written action wrappers for the resource kinds the CLI manages."""

from ucloudctl.services.uhost import UHostInstance, uhost_describer
from ucloudctl.services.ulb import ULB

__all__ = ["ULB", "UHostInstance", "uhost_describer"]
