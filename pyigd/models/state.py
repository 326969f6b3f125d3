from enum import Enum


class GatewayStatus(Enum):
    NOT_DISCOVERED = "not discovered"
    DISCOVERING = "discovering"
    AVAILABLE = "available"
    UNAVAILABLE = "unavailable"


class GatewayState:
    """
    Snapshot of what discovery learned about the gateway

    Never mutated after construction, a new discovery attempt publishes a new one.
    control_url is set if and only if available is True.
    """

    __slots__ = ("discovered", "available", "description_url", "control_url", "event_url", "error")

    def __init__(self,
        discovered: bool = False,
        available: bool = False,
        description_url: str = None,
        control_url: str = None,
        event_url: str = None,
        error: Exception = None
    ):
        """
        discovered - whether a discovery attempt has completed
        available - whether that attempt found a usable gateway
        description_url - LOCATION of the device description
        control_url - WANIPConnection control endpoint
        event_url - WANIPConnection event subscription endpoint
        error - exception that made the attempt fail, if any
        """

        if available and not (discovered and control_url):
            raise ValueError("An available gateway must be discovered and have a control url")
        if control_url and not available:
            raise ValueError("An unavailable gateway cannot have a control url")

        self.discovered = discovered
        self.available = available
        self.description_url = description_url
        self.control_url = control_url
        self.event_url = event_url
        self.error = error

    @classmethod
    def found(cls, description_url: str, control_url: str, event_url: str = None) -> "GatewayState":
        return cls(
            discovered=True,
            available=True,
            description_url=description_url,
            control_url=control_url,
            event_url=event_url
        )

    @classmethod
    def failed(cls, error: Exception, description_url: str = None) -> "GatewayState":
        return cls(discovered=True, description_url=description_url, error=error)

    @property
    def status(self) -> GatewayStatus:
        if not self.discovered:
            return GatewayStatus.NOT_DISCOVERED
        if self.available:
            return GatewayStatus.AVAILABLE
        return GatewayStatus.UNAVAILABLE

    def __repr__(self) -> str:
        return f"GatewayState(discovered={self.discovered}, available={self.available}, description_url={self.description_url}, control_url={self.control_url}, event_url={self.event_url}, error={self.error!r})"
