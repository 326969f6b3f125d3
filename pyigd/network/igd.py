import logging
from typing import Optional

import requests
from bs4 import Tag
from yarl import URL

from pyigd.network.markup import parse_xml
from pyigd.static import SCHEME, DEVICE_NAMESPACE, GATEWAY_DEVICE, REQUEST_TIMEOUT
from pyigd.exceptions import FetchError, NotGatewayDeviceError, ServiceNotFoundError

logger = logging.getLogger(__name__)


class IGD:
    def __init__(self, description_url: str, control_url: str, event_url: str = None):
        """
        description_url - location of the device description
        control_url - absolute WANIPConnection control url
        event_url - absolute WANIPConnection event subscription url, if the device has one
        """

        self._description_url = description_url
        self._control_url = control_url
        self._event_url = event_url

    @property
    def description_url(self) -> str:
        return self._description_url

    @property
    def control_url(self) -> str:
        return self._control_url

    @property
    def event_url(self) -> Optional[str]:
        return self._event_url

    @property
    def ip(self) -> str:
        return URL(self._control_url).host

    def __repr__(self) -> str:
        return f"IGD(description_url={self._description_url}, control_url={self._control_url}, event_url={self._event_url})"


class DeviceDescriptionResolver:
    def __init__(self, timeout: float = REQUEST_TIMEOUT):
        """
        timeout - seconds to wait for the device description
        """

        self.timeout = timeout

    def resolve(self, description_url: str) -> IGD:
        """
        Fetches a device description and finds the WANIPConnection service in it

        description_url - LOCATION advertised by the device over SSDP

        Raises FetchError, NotGatewayDeviceError or ServiceNotFoundError
        """

        origin = self.origin(description_url)

        logger.debug("Fetching device description from %s", description_url)
        try:
            r = requests.get(description_url, timeout=self.timeout)
            r.raise_for_status()
        except requests.RequestException as e:
            raise FetchError("Could not fetch {}: {}".format(description_url, e)) from e

        try:
            parser = parse_xml(r.content)
        except ValueError as e:
            raise FetchError("{} is not a well-formed description: {}".format(description_url, e)) from e

        # the first device in document order is the root device
        device = _find(parser, "device")
        device_type = _string(_find(device, "deviceType", recursive=False))
        if not device_type or GATEWAY_DEVICE not in device_type:
            raise NotGatewayDeviceError(
                "{} describes {!r}, not an {}".format(description_url, device_type, GATEWAY_DEVICE)
            )

        # look for the wan ip connection among all embedded services
        service = None
        for service_type in parser.find_all(_named("serviceType")):
            if _string(service_type) == SCHEME:
                service = service_type.parent
                break
        control_path = _string(_find(service, "controlURL", recursive=False))
        if not control_path:
            raise ServiceNotFoundError("{} has no {} service".format(description_url, SCHEME))
        event_path = _string(_find(service, "eventSubURL", recursive=False))

        igd = IGD(
            description_url,
            self.join(origin, control_path),
            self.join(origin, event_path) if event_path else None
        )
        logger.debug("Resolved %r", igd)
        return igd

    @staticmethod
    def origin(description_url: str) -> str:
        """
        Returns scheme, host and port of the description url

        Raises FetchError if the url has no authority to resolve against
        """

        try:
            url = URL(description_url)
            origin = url.origin()
        except (TypeError, ValueError) as e:
            raise FetchError("Invalid description url {!r}".format(description_url)) from e
        if url.scheme not in ("http", "https") or not url.host:
            raise FetchError("Invalid description url {!r}".format(description_url))
        return str(origin).rstrip("/")

    @staticmethod
    def join(origin: str, path: str) -> str:
        """
        Appends an absolute path reference from the description to its origin

        origin - scheme://host:port of the description url
        path - controlURL or eventSubURL from the description
        """

        try:
            absolute = URL(path).is_absolute()
        except (TypeError, ValueError) as e:
            raise FetchError("Invalid service url {!r}".format(path)) from e
        if absolute:
            return path
        if not path.startswith("/"):
            path = "/" + path
        return origin + path


def _named(name: str):
    return lambda tag: tag.name == name and tag.namespace == DEVICE_NAMESPACE


def _find(parent: Optional[Tag], name: str, recursive: bool = True) -> Optional[Tag]:
    if parent is None:
        return None
    return parent.find(_named(name), recursive=recursive)


def _string(tag: Optional[Tag]) -> Optional[str]:
    if tag is None or tag.string is None:
        return None
    return tag.string.strip()
