from pyigd.network.soap import SoapClient
from pyigd.network.igd import IGD, DeviceDescriptionResolver
from pyigd.network.ssdp import SsdpDiscoverer
from pyigd.network.host import get_default_gateway, get_local_ip
