from .device_set import DeviceSet
from .watch import ActigraphWatch
from .sim import SimCard, SimRechargeHistory

__all__ = [
    "DeviceSet",
    "ActigraphWatch",
    "SimCard",
    "SimRechargeHistory",
]
