class IGDError(Exception):
    """
    Base class for every error raised by pyigd
    """


class TransportError(IGDError):
    """
    Socket or HTTP send/receive failure, including timeouts
    """


class NoResponseError(TransportError):
    """
    No root device answered the SSDP search before the timeout
    """


class ProtocolError(IGDError):
    """
    Malformed or unexpected response at any protocol layer
    """


class MalformedResponseError(ProtocolError):
    """
    SSDP response without a root device advertisement or a usable LOCATION
    """


class SoapFaultError(ProtocolError):
    """
    The IGD answered a control action with a UPnP fault

    code - UPnP error code as sent by the device (e.g. "714")
    description - errorDescription sent by the device
    """

    def __init__(self, code: str = None, description: str = None, status: int = None):
        self.code = code
        self.description = description
        self.status = status
        super().__init__(
            "UPnP fault {code}: {description}".format(code=code, description=description)
        )


class ParseError(ProtocolError):
    """
    A value in a control response could not be interpreted
    """


class FetchError(IGDError):
    """
    The device description could not be retrieved or parsed
    """


class NotGatewayDeviceError(IGDError):
    """
    The described root device is not an InternetGatewayDevice
    """


class ServiceNotFoundError(IGDError):
    """
    The device description has no usable WANIPConnection service
    """


class NoGatewayAvailableError(IGDError):
    """
    Discovery found no usable gateway
    """


class NotDiscoveredError(IGDError):
    """
    Operation needs a control url but discovery has not produced one
    """
