"""ucloudctl - command-line client for the UCloud control-plane API.

Example:

    from ucloudctl import ApiClient, PollRequest, load_profile, poll
    from ucloudctl.services import uhost_describer

    async with ApiClient(load_profile()) as client:
        handle = poll(uhost_describer(client), PollRequest(
            resource_id="uhost-xxxx",
            project_id="",
            region="cn-bj2",
            zone="cn-bj2-05",
            target_states=("Running",),
        ))
        outcome = await handle
"""

__version__ = "0.4.0"

from ucloudctl.api import ApiClient
from ucloudctl.config import Profile, load_profile
from ucloudctl.core.exceptions import (
    ApiError,
    ConfigurationError,
    SchemaError,
    UCloudError,
    WaitTimeoutError,
)
from ucloudctl.display import OutputContext, render_table
from ucloudctl.wait import (
    DescribeError,
    PollHandle,
    Poller,
    PollRequest,
    Stateful,
    Success,
    Timeout,
    WaitOutcome,
    extract_state,
    poll,
    wait_all,
)

__all__ = [
    "ApiClient",
    "ApiError",
    "ConfigurationError",
    "DescribeError",
    "OutputContext",
    "PollHandle",
    "PollRequest",
    "Poller",
    "Profile",
    "SchemaError",
    "Stateful",
    "Success",
    "Timeout",
    "UCloudError",
    "WaitOutcome",
    "WaitTimeoutError",
    "__version__",
    "extract_state",
    "load_profile",
    "poll",
    "render_table",
    "wait_all",
]
