from pyigd.models.action import SoapAction
from pyigd.models.mapping import PortMapping
from pyigd.models.state import GatewayState, GatewayStatus
