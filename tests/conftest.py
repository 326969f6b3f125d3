import socket

import pytest
import requests
from bs4 import BeautifulSoup

from pyigd.static import SCHEME

GATEWAY_IP = "192.168.1.1"
LOCAL_IP = "192.168.1.10"
EXTERNAL_IP = "203.0.113.7"
LOCATION = "http://192.168.1.1:5000/desc.xml"

SSDP_RESPONSE = (
    b"HTTP/1.1 200 OK\r\n"
    b"CACHE-CONTROL: max-age=120\r\n"
    b"ST: upnp:rootdevice\r\n"
    b"USN: uuid:00000000-0000-0000-0000-000000000001::upnp:rootdevice\r\n"
    b"EXT:\r\n"
    b"SERVER: Linux/5.4 UPnP/1.1 MiniUPnPd/2.2\r\n"
    b"LOCATION: http://192.168.1.1:5000/desc.xml\r\n"
    b"\r\n"
)

DESCRIPTION = """<?xml version="1.0"?>
<root xmlns="urn:schemas-upnp-org:device-1-0">
  <specVersion><major>1</major><minor>0</minor></specVersion>
  <device>
    <deviceType>{device_type}</deviceType>
    <friendlyName>Test Router</friendlyName>
    <serviceList>
      <service>
        <serviceType>urn:schemas-upnp-org:service:Layer3Forwarding:1</serviceType>
        <controlURL>/ctl/L3F</controlURL>
        <eventSubURL>/evt/L3F</eventSubURL>
      </service>
    </serviceList>
    <deviceList>
      <device>
        <deviceType>urn:schemas-upnp-org:device:WANDevice:1</deviceType>
        <deviceList>
          <device>
            <deviceType>urn:schemas-upnp-org:device:WANConnectionDevice:1</deviceType>
            <serviceList>
              <service>
                <serviceType>{service_type}</serviceType>
                <controlURL>{control_url}</controlURL>
                <eventSubURL>/evt/IPConn</eventSubURL>
              </service>
            </serviceList>
          </device>
        </deviceList>
      </device>
    </deviceList>
  </device>
</root>
"""


def make_description(
    device_type="urn:schemas-upnp-org:device:InternetGatewayDevice:1",
    service_type=SCHEME,
    control_url="/ctl/WANIP"
) -> bytes:
    return DESCRIPTION.format(
        device_type=device_type,
        service_type=service_type,
        control_url=control_url
    ).encode()


def envelope(content: str) -> bytes:
    return (
        '<?xml version="1.0"?>'
        '<s:Envelope xmlns:s="http://schemas.xmlsoap.org/soap/envelope/" '
        's:encodingStyle="http://schemas.xmlsoap.org/soap/encoding/">'
        "<s:Body>{}</s:Body></s:Envelope>".format(content)
    ).encode()


def action_response(action: str, content: str = "") -> bytes:
    return envelope('<u:{action}Response xmlns:u="{scheme}">{content}</u:{action}Response>'.format(
        action=action, scheme=SCHEME, content=content
    ))


def fault(code: int, description: str) -> bytes:
    return envelope(
        "<s:Fault><faultcode>s:Client</faultcode><faultstring>UPnPError</faultstring>"
        '<detail><UPnPError xmlns="urn:schemas-upnp-org:control-1-0">'
        "<errorCode>{}</errorCode><errorDescription>{}</errorDescription>"
        "</UPnPError></detail></s:Fault>".format(code, description)
    )


class FakeResponse:
    def __init__(self, status_code: int = 200, content: bytes = b""):
        self.status_code = status_code
        self.content = content

    @property
    def ok(self) -> bool:
        return self.status_code < 400

    def raise_for_status(self):
        if not self.ok:
            raise requests.HTTPError("{} Error".format(self.status_code), response=self)


class FakeRouter:
    """
    Answers description GETs and WANIPConnection SOAP posts, keeping a NAT table
    """

    def __init__(self):
        self.descriptions = {LOCATION: FakeResponse(200, make_description())}
        self.mappings = {}
        self.requests = []
        self.external_ip = EXTERNAL_IP
        self.fail_with = None

    def get(self, url, timeout=None, **kwargs):
        self.requests.append(("GET", url, None, None))
        if self.fail_with is not None:
            raise self.fail_with
        if url not in self.descriptions:
            return FakeResponse(404, b"Not Found")
        return self.descriptions[url]

    def post(self, url, headers=None, data=None, timeout=None, **kwargs):
        self.requests.append(("POST", url, headers, data))
        if self.fail_with is not None:
            raise self.fail_with

        action = headers["SOAPACTION"].strip('"').split("#")[1]
        parser = BeautifulSoup(data, "lxml-xml")

        def arg(name):
            return parser.find(name).get_text(strip=True)

        if action == "AddPortMapping":
            key = (int(arg("NewExternalPort")), arg("NewProtocol"))
            self.mappings[key] = {
                "internal_port": int(arg("NewInternalPort")),
                "internal_client": arg("NewInternalClient"),
                "description": arg("NewPortMappingDescription"),
                "lease": int(arg("NewLeaseDuration")),
                "enabled": arg("NewEnabled"),
            }
            return FakeResponse(200, action_response(action))
        if action == "DeletePortMapping":
            key = (int(arg("NewExternalPort")), arg("NewProtocol"))
            if key not in self.mappings:
                return FakeResponse(500, fault(714, "NoSuchEntryInArray"))
            del self.mappings[key]
            return FakeResponse(200, action_response(action))
        if action == "GetExternalIPAddress":
            return FakeResponse(200, action_response(
                action, "<NewExternalIPAddress>{}</NewExternalIPAddress>".format(self.external_ip)
            ))
        if action == "GetGenericPortMappingEntry":
            index = int(arg("NewPortMappingIndex"))
            entries = sorted(self.mappings.items())
            if index >= len(entries):
                return FakeResponse(500, fault(713, "SpecifiedArrayIndexInvalid"))
            (port, protocol), entry = entries[index]
            return FakeResponse(200, action_response(action, (
                "<NewRemoteHost></NewRemoteHost>"
                "<NewExternalPort>{port}</NewExternalPort>"
                "<NewProtocol>{protocol}</NewProtocol>"
                "<NewInternalPort>{internal_port}</NewInternalPort>"
                "<NewInternalClient>{internal_client}</NewInternalClient>"
                "<NewEnabled>{enabled}</NewEnabled>"
                "<NewPortMappingDescription>{description}</NewPortMappingDescription>"
                "<NewLeaseDuration>{lease}</NewLeaseDuration>"
            ).format(port=port, protocol=protocol, **entry)))
        return FakeResponse(500, fault(401, "Invalid Action"))

    def soap_actions(self):
        return [headers["SOAPACTION"] for method, _, headers, _ in self.requests if method == "POST"]


class FakeSocket:
    def __init__(self, responses):
        self.responses = list(responses)
        self.sent = []
        self.options = []
        self.timeouts = []
        self.closed = False

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        self.closed = True
        return False

    def setsockopt(self, level, option, value):
        self.options.append((level, option, value))

    def settimeout(self, timeout):
        self.timeouts.append(timeout)

    def sendto(self, data, address):
        self.sent.append((data, address))

    def recvfrom(self, size):
        if not self.responses:
            raise socket.timeout("timed out")
        return self.responses.pop(0), (GATEWAY_IP, 1900)


class FakeSocketFactory:
    def __init__(self, *responses):
        self.responses = responses
        self.sockets = []

    def __call__(self, family, kind):
        sock = FakeSocket(self.responses)
        self.sockets.append(sock)
        return sock


@pytest.fixture
def router(monkeypatch):
    router = FakeRouter()
    monkeypatch.setattr(requests, "get", router.get)
    monkeypatch.setattr(requests, "post", router.post)
    return router


@pytest.fixture
def ssdp_socket():
    return FakeSocketFactory(SSDP_RESPONSE)
