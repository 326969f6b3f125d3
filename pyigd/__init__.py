"""
pyigd: UPnP Internet Gateway Device control
Discovers the IGD behind the default gateway, maps ports on it and asks it for the external ip
"""

from pyigd.controller import GatewayController
from pyigd.models import GatewayState, GatewayStatus, PortMapping, SoapAction
from pyigd.exceptions import (
    IGDError,
    TransportError,
    NoResponseError,
    ProtocolError,
    MalformedResponseError,
    SoapFaultError,
    ParseError,
    FetchError,
    NotGatewayDeviceError,
    ServiceNotFoundError,
    NoGatewayAvailableError,
    NotDiscoveredError,
)

__version__ = "0.1.0"
