import socket
import logging

import netifaces

from pyigd.exceptions import NoGatewayAvailableError, TransportError

logger = logging.getLogger(__name__)


def get_default_gateway() -> str:
    """
    Returns the ipv4 address of the default gateway
    """

    gateways = netifaces.gateways()
    default = gateways.get("default", {}).get(netifaces.AF_INET)
    if default:
        address = default[0]
    else:
        # no default route, fall back to the first ipv4 gateway of any interface
        candidates = gateways.get(netifaces.AF_INET, [])
        if not candidates:
            raise NoGatewayAvailableError("No ipv4 gateway configured on this host")
        address = candidates[0][0]

    logger.debug("Default gateway is %s", address)
    return address


def get_local_ip(gateway_ip: str) -> str:
    """
    Returns the local ip address used to reach the gateway

    gateway_ip - ip address of the igd
    """

    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as s:
            # connecting a datagram socket only picks the route, nothing is sent
            s.connect((gateway_ip, 0))
            ip = s.getsockname()[0]
    except OSError as e:
        raise TransportError("No route to gateway {}: {}".format(gateway_ip, e)) from e

    logger.debug("Local ip is %s", ip)
    return ip
