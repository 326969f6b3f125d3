from bs4 import BeautifulSoup
from bs4.builder import ParserRejectedMarkup
from lxml import etree


def parse_xml(content: bytes) -> BeautifulSoup:
    """
    content - raw response body

    Returns a bs4 parser of the document
    Raises ValueError if content is not well-formed xml, lxml-xml alone would repair it
    """

    try:
        etree.fromstring(content, etree.XMLParser(resolve_entities=False, no_network=True))
    except etree.XMLSyntaxError as e:
        raise ValueError("Not well-formed xml: {}".format(e)) from e

    try:
        return BeautifulSoup(content, "lxml-xml")
    except ParserRejectedMarkup as e:
        raise ValueError("Not well-formed xml: {}".format(e)) from e
