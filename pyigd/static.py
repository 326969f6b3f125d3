SCHEME = "urn:schemas-upnp-org:service:WANIPConnection:1"
DEVICE_NAMESPACE = "urn:schemas-upnp-org:device-1-0"
GATEWAY_DEVICE = "InternetGatewayDevice"

SOAP_ENVELOPE_NAMESPACE = "http://schemas.xmlsoap.org/soap/envelope/"
SOAP_ENCODING_NAMESPACE = "http://schemas.xmlsoap.org/soap/encoding/"

SSDP_PORT = 1900
SSDP_SEARCH_TARGET = "upnp:rootdevice"
SSDP_MX = 3
SSDP_BUFFER_SIZE = 4096
SSDP_REQUEST = (
    "M-SEARCH * HTTP/1.1\r\n"
    "HOST: {host}:{port}\r\n"
    "ST:{target}\r\n"
    'MAN:"ssdp:discover"\r\n'
    "MX:{mx}\r\n\r\n"
)

# seconds
DISCOVERY_TIMEOUT = 3
REQUEST_TIMEOUT = 10

PROTOCOLS = ("TCP", "UDP")
