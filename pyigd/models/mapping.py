from __future__ import annotations

from datetime import timedelta
from typing import Union, Literal

from bs4 import BeautifulSoup

from pyigd.exceptions import ParseError


class PortMapping:
    def __init__(self,
        external_port: int,
        protocol: Union[Literal["TCP"], Literal["UDP"]],
        internal_port: int,
        internal_client: str,
        description: str = "",
        enabled: bool = True,
        lease_duration: timedelta = timedelta(0),
        remote_host: str = ""
    ):
        """
        external_port - port on the igd that is forwarded
        protocol - protocol allowed over port ("TCP" or "UDP")
        internal_port - port on the internal client receiving the traffic
        internal_client - ip of the internal client
        description - description of port forward
        enabled - whether the igd currently applies the mapping
        lease_duration - remaining lease as a timedelta, zero for permanent mappings
        remote_host - remote host the mapping is restricted to, empty for any
        """

        self.external_port = external_port
        self.protocol = protocol
        self.internal_port = internal_port
        self.internal_client = internal_client
        self.description = description
        self.enabled = enabled
        self.lease_duration = lease_duration
        self.remote_host = remote_host

    @classmethod
    def from_response(cls, parser: BeautifulSoup) -> PortMapping:
        """
        Builds a mapping from a GetGenericPortMappingEntry response

        parser - bs4 parser of IGD response
        """

        try:
            return cls(
                external_port=int(_text(parser, "NewExternalPort")),
                protocol=_text(parser, "NewProtocol").upper(),
                internal_port=int(_text(parser, "NewInternalPort")),
                internal_client=_text(parser, "NewInternalClient"),
                description=_text(parser, "NewPortMappingDescription", ""),
                enabled=_text(parser, "NewEnabled", "1") in ("1", "true", "yes"),
                lease_duration=timedelta(seconds=int(_text(parser, "NewLeaseDuration", "0"))),
                remote_host=_text(parser, "NewRemoteHost", "")
            )
        except (TypeError, ValueError) as e:
            raise ParseError("Invalid port mapping entry: {}".format(e)) from e

    def __eq__(self, other) -> bool:
        if not isinstance(other, PortMapping):
            return NotImplemented
        return vars(self) == vars(other)

    def __repr__(self) -> str:
        return f"PortMapping(external_port={self.external_port}, protocol={self.protocol}, internal_port={self.internal_port}, internal_client={self.internal_client}, description={self.description}, enabled={self.enabled}, lease_duration={self.lease_duration}, remote_host={self.remote_host})"


def _text(parser: BeautifulSoup, name: str, default: str = None) -> str:
    tag = parser.find(name)
    # empty elements have no string
    if tag is None or tag.string is None:
        if default is None:
            raise ParseError("Missing {} in response".format(name))
        return default
    return tag.string.strip()
