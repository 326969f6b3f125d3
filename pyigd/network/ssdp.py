import re
import time
import socket
import logging

from pyigd.static import SSDP_REQUEST, SSDP_PORT, SSDP_SEARCH_TARGET, SSDP_MX, SSDP_BUFFER_SIZE, DISCOVERY_TIMEOUT
from pyigd.exceptions import NoResponseError, MalformedResponseError, TransportError

logger = logging.getLogger(__name__)

LOCATION = re.compile(r"^location:(?P<value>.*?)\r\n", re.IGNORECASE | re.MULTILINE)


class SsdpDiscoverer:
    def __init__(self, timeout: float = DISCOVERY_TIMEOUT, socket_factory=socket.socket):
        """
        timeout - how long to wait for a root device response in seconds
        socket_factory - callable returning a datagram socket
        """

        self.timeout = timeout
        self.socket_factory = socket_factory

    @staticmethod
    def make_request(gateway_ip: str) -> bytes:
        return SSDP_REQUEST.format(
            host=gateway_ip,
            port=SSDP_PORT,
            target=SSDP_SEARCH_TARGET,
            mx=SSDP_MX
        ).encode("ascii")

    def discover(self, gateway_ip: str) -> str:
        """
        Asks the gateway for its root device and returns the advertised LOCATION

        gateway_ip - address of the default gateway

        Raises NoResponseError if nothing answered in time,
            MalformedResponseError if only unusable answers arrived
        """

        deadline = time.monotonic() + self.timeout
        received = 0

        try:
            sock = self.socket_factory(socket.AF_INET, socket.SOCK_DGRAM)
        except OSError as e:
            raise TransportError("Could not open SSDP socket: {}".format(e)) from e

        with sock:
            logger.debug("Sending M-SEARCH to %s:%s", gateway_ip, SSDP_PORT)
            try:
                sock.setsockopt(socket.SOL_SOCKET, socket.SO_BROADCAST, 1)
                sock.sendto(self.make_request(gateway_ip), (gateway_ip, SSDP_PORT))
            except OSError as e:
                raise TransportError("Could not send M-SEARCH to {}: {}".format(gateway_ip, e)) from e

            # keep reading until a root device answers or the window closes
            while True:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    break
                sock.settimeout(remaining)
                try:
                    response, address = sock.recvfrom(SSDP_BUFFER_SIZE)
                except socket.timeout:
                    break
                except OSError as e:
                    raise TransportError("Could not receive SSDP response: {}".format(e)) from e

                received += 1
                location = self.parse_response(response.decode("ascii", errors="replace"))
                if location is not None:
                    logger.debug("Root device at %s advertised %s", address[0], location)
                    return location
                logger.debug("Ignoring SSDP response from %s", address[0])

        if received:
            raise MalformedResponseError(
                "{} SSDP responses received, none with a root device location".format(received)
            )
        raise NoResponseError("No SSDP response from {} within {}s".format(gateway_ip, self.timeout))

    @staticmethod
    def parse_response(response: str):
        """
        Returns the LOCATION of a root device advertisement, None for anything else

        response - raw SSDP response text
        """

        if SSDP_SEARCH_TARGET not in response.lower():
            return None
        match = LOCATION.search(response)
        if match is None:
            return None
        return match.group("value").strip() or None
