import logging
import threading
import ipaddress
from typing import List, Optional, Union

from yarl import URL

from pyigd.log import enable_debug_logging
from pyigd.models import SoapAction, PortMapping, GatewayState, GatewayStatus
from pyigd.network import SoapClient, DeviceDescriptionResolver, SsdpDiscoverer, get_default_gateway, get_local_ip
from pyigd.static import DISCOVERY_TIMEOUT, REQUEST_TIMEOUT, PROTOCOLS
from pyigd.exceptions import (
    IGDError, SoapFaultError, ParseError, NoGatewayAvailableError, NotDiscoveredError
)

logger = logging.getLogger(__name__)

IPAddress = Union[ipaddress.IPv4Address, ipaddress.IPv6Address]

# GetGenericPortMappingEntry past the end of the table
ARRAY_INDEX_INVALID = ("713", "SpecifiedArrayIndexInvalid")


class GatewayController:
    def __init__(
        self,
        discovery_timeout: float = None,
        request_timeout: float = None,
        gateway_ip: str = None,
        local_ip: str = None,
        debug: bool = False,
        ssdp: SsdpDiscoverer = None,
        resolver: DeviceDescriptionResolver = None,
        soap: SoapClient = None
    ):
        """
        discovery_timeout - how long to wait for IGD response (default is 3 seconds)
        request_timeout - how long to wait for description and control requests (default is 10 seconds)
        gateway_ip - address to send the SSDP search to (default is the host's default gateway)
        local_ip - internal client for new mappings (default is the address routing to the IGD)
        debug - whether to print debug information and write it to log.txt
        ssdp, resolver, soap - replacements for the network components

        Injected components keep their own timeouts unless a timeout is passed here,
            setting discovery_timeout or request_timeout later applies to every component

        Nothing is sent until discover or a control operation is called
        """

        if debug:
            enable_debug_logging()

        self.gateway_ip = gateway_ip
        self.local_ip = local_ip

        self._ssdp = ssdp if ssdp is not None else SsdpDiscoverer(DISCOVERY_TIMEOUT)
        self._resolver = resolver if resolver is not None else DeviceDescriptionResolver(REQUEST_TIMEOUT)
        self._soap = soap if soap is not None else SoapClient(REQUEST_TIMEOUT)
        if discovery_timeout is not None:
            self.discovery_timeout = discovery_timeout
        if request_timeout is not None:
            self.request_timeout = request_timeout

        self._state = GatewayState()
        self._lock = threading.Lock()
        self._discovering = False

    @property
    def discovery_timeout(self) -> float:
        return self._ssdp.timeout

    @discovery_timeout.setter
    def discovery_timeout(self, value: float):
        if value <= 0:
            raise ValueError("Discovery timeout must be positive")
        self._ssdp.timeout = value

    @property
    def request_timeout(self) -> float:
        return self._soap.timeout

    @request_timeout.setter
    def request_timeout(self, value: float):
        if value <= 0:
            raise ValueError("Request timeout must be positive")
        self._resolver.timeout = value
        self._soap.timeout = value

    @property
    def state(self) -> GatewayState:
        return self._state

    @property
    def status(self) -> GatewayStatus:
        if self._discovering:
            return GatewayStatus.DISCOVERING
        return self._state.status

    @property
    def discovered(self) -> bool:
        return self._state.discovered

    @property
    def available(self) -> bool:
        return self._state.available

    @property
    def description_url(self) -> Optional[str]:
        return self._state.description_url

    @property
    def control_url(self) -> Optional[str]:
        return self._state.control_url

    @property
    def event_url(self) -> Optional[str]:
        return self._state.event_url

    @property
    def last_error(self) -> Optional[Exception]:
        return self._state.error

    def discover(self, force: bool = False) -> bool:
        """
        force - search again even if an earlier attempt finished

        Looks for an IGD on the network
        Returns whether one is available, failures are kept in last_error instead of raised
        """

        state = self._state
        if state.discovered and not force:
            return state.available

        with self._lock:
            # another thread may have finished discovery while we waited
            state = self._state
            if state.discovered and not force:
                return state.available

            self._discovering = True
            try:
                self._state = self._search()
            finally:
                self._discovering = False
            return self._state.available

    def _search(self) -> GatewayState:
        description_url = None
        try:
            gateway_ip = self.gateway_ip or get_default_gateway()
            logger.info("Looking for IGD via %s", gateway_ip)
            description_url = self._ssdp.discover(gateway_ip)
            igd = self._resolver.resolve(description_url)
        except IGDError as e:
            logger.info("No IGD available: %s", e)
            return GatewayState.failed(e, description_url)

        logger.info("IGD detected, control url is %s", igd.control_url)
        return GatewayState.found(description_url, igd.control_url, igd.event_url)

    def _require_gateway(self) -> str:
        control_url = self._state.control_url
        if not control_url:
            self.discover()
            state = self._state
            control_url = state.control_url
            if not control_url:
                raise NoGatewayAvailableError("No UPnP gateway available") from state.error
        return control_url

    def add_port_mapping(self, port: int, protocol: str, description: str = "pyigd"):
        """
        port - port to map, used both on the IGD and on this host
        protocol - protocol to allow over port ("TCP" or "UDP")
        description - description of port forward

        Forwards the port on the IGD to the same port on this host, with no lease expiry
        Mapping a port/protocol pair again replaces the existing mapping
        """

        protocol = _check_mapping(port, protocol)
        control_url = self._require_gateway()
        internal_ip = self.local_ip or get_local_ip(URL(control_url).host)

        action = SoapAction("AddPortMapping", [
            ("NewRemoteHost", ""),
            ("NewExternalPort", port),
            ("NewProtocol", protocol),
            ("NewInternalPort", port),
            ("NewInternalClient", internal_ip),
            ("NewEnabled", 1),
            ("NewPortMappingDescription", description),
            ("NewLeaseDuration", 0),
        ])
        self._soap.call(control_url, action)
        logger.info("Mapped %s port %s to %s", protocol, port, internal_ip)

    def delete_port_mapping(self, port: int, protocol: str) -> bool:
        """
        port - external port of the mapping
        protocol - protocol of the mapping ("TCP" or "UDP")

        Removes the mapping for the port/protocol pair
        Returns False if the IGD refused because there was nothing to remove
        """

        protocol = _check_mapping(port, protocol)
        control_url = self._require_gateway()

        action = SoapAction("DeletePortMapping", [
            ("NewRemoteHost", ""),
            ("NewExternalPort", port),
            ("NewProtocol", protocol),
        ])
        try:
            self._soap.call(control_url, action)
        except SoapFaultError as e:
            logger.info("No %s mapping on port %s to delete (%s)", protocol, port, e)
            return False

        logger.info("Deleted %s mapping on port %s", protocol, port)
        return True

    def get_external_ip(self) -> IPAddress:
        """
        Returns the external ip address of the IGD

        Unlike the mapping operations this never starts discovery
        """

        control_url = self._state.control_url
        if not control_url:
            raise NotDiscoveredError("No UPnP service available or discover() has not been called")

        parser = self._soap.call(control_url, SoapAction("GetExternalIPAddress"))

        tag = parser.find("NewExternalIPAddress")
        if tag is None:
            raise ParseError("Response has no NewExternalIPAddress")
        value = tag.get_text(strip=True)
        try:
            ip = ipaddress.ip_address(value)
        except ValueError as e:
            raise ParseError("Invalid external ip {!r}".format(value)) from e

        logger.debug("External ip is %s", ip)
        return ip

    def get_port_mapping(self, index: int) -> PortMapping:
        """
        Get a single mapping given the index in the IGD's table of mappings
        """

        control_url = self._require_gateway()
        parser = self._soap.call(
            control_url,
            SoapAction("GetGenericPortMappingEntry", [("NewPortMappingIndex", index)])
        )
        return PortMapping.from_response(parser)

    def get_port_mappings(self) -> List[PortMapping]:
        """
        Returns list of all mappings on the IGD
        """

        index = 0
        mappings = []
        # keep going until we get an out of bounds error
        while True:
            try:
                mappings.append(self.get_port_mapping(index))
            except SoapFaultError as e:
                if e.code in ARRAY_INDEX_INVALID or e.description in ARRAY_INDEX_INVALID:
                    break
                raise
            index += 1

        logger.debug("IGD has %d mappings", len(mappings))
        return mappings


def _check_mapping(port: int, protocol: str) -> str:
    if isinstance(port, bool) or not isinstance(port, int) or not 0 < port < 65536:
        raise ValueError("Port must be an integer between 1 and 65535")
    if not isinstance(protocol, str) or protocol.upper() not in PROTOCOLS:
        raise ValueError("Protocol must be TCP or UDP")
    return protocol.upper()
