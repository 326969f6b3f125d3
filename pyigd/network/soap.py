import logging
from typing import Dict

import requests
from bs4 import BeautifulSoup

from pyigd.models import SoapAction
from pyigd.network.markup import parse_xml
from pyigd.static import SCHEME, SOAP_ENVELOPE_NAMESPACE, SOAP_ENCODING_NAMESPACE, REQUEST_TIMEOUT
from pyigd.exceptions import TransportError, ProtocolError, SoapFaultError

logger = logging.getLogger(__name__)


class SoapClient:
    def __init__(self, timeout: float = REQUEST_TIMEOUT):
        """
        timeout - seconds to wait for the igd to answer a control request
        """

        self.timeout = timeout

    @staticmethod
    def make_headers(action: str) -> Dict[str, str]:
        """
        Generates headers for request

        action - SOAPAction
        """

        return {
            "SOAPACTION": '"{scheme}#{action}"'.format(
                scheme=SCHEME,
                action=action
            ),
            "Content-Type": 'text/xml; charset="utf-8"'
        }

    @staticmethod
    def make_body(content: str) -> str:
        """
        Generates body for request

        content - body content
        """

        return (
            '<?xml version="1.0"?>'
            '<s:Envelope xmlns:s="{envelope}" s:encodingStyle="{encoding}">'
            "<s:Body>{content}</s:Body>"
            "</s:Envelope>"
        ).format(
            envelope=SOAP_ENVELOPE_NAMESPACE,
            encoding=SOAP_ENCODING_NAMESPACE,
            content=content
        )

    def invoke(self, control_url: str, content: str, action: str) -> BeautifulSoup:
        """
        Posts a control action to the igd and returns the parsed response

        control_url - WANIPConnection control endpoint
        content - inner SOAP body
        action - name of the action in content
        """

        headers = self.make_headers(action)
        body = self.make_body(content)

        logger.debug("Sending %s to %s", action, control_url)
        try:
            r = requests.post(
                str(control_url),
                headers=headers,
                data=body.encode("utf-8"),
                timeout=self.timeout
            )
        except requests.RequestException as e:
            raise TransportError("{} request to {} failed: {}".format(action, control_url, e)) from e

        try:
            parser = parse_xml(r.content)
        except ValueError as e:
            raise ProtocolError("{} response is not well-formed xml: {}".format(action, e)) from e
        # raise errors
        self.raise_errors(parser, r.status_code)
        if not 200 <= r.status_code < 300:
            raise ProtocolError("{} failed with HTTP status {}".format(action, r.status_code))
        if parser.find("Body") is None:
            raise ProtocolError("{} response is not a SOAP document".format(action))

        logger.debug("%s succeeded", action)
        return parser

    def call(self, control_url: str, action: SoapAction) -> BeautifulSoup:
        return self.invoke(control_url, action.to_xml(), action.action_name)

    @staticmethod
    def raise_errors(parser: BeautifulSoup, status: int = None):
        """
        Raises errors in response from IGD if they exist

        parser - bs4 parser of IGD response
        status - HTTP status the response came with
        """

        code = parser.find("errorCode")
        description = parser.find("errorDescription")
        if code is None and description is None:
            return

        code = code.get_text(strip=True) if code is not None else None
        description = description.get_text(strip=True) if description is not None else None
        logger.debug("IGD fault %s: %s", code, description)
        raise SoapFaultError(code, description, status)
