from typing import Any, Sequence, Tuple
from xml.sax.saxutils import escape

from pyigd.static import SCHEME


class SoapAction:
    def __init__(
        self,
        action_name: str,
        parameters: Sequence[Tuple[str, Any]] = (),
        namespace_uri: str = SCHEME
    ):
        """
        action_name - name of the UPnP action (e.g. "AddPortMapping")
        parameters - ordered (name, value) pairs, sent in the given order
        namespace_uri - service type the action belongs to
        """

        self.action_name = action_name
        self.namespace_uri = namespace_uri
        self.parameters = tuple(parameters)

    def to_xml(self) -> str:
        """
        Renders the inner SOAP body for this action
        """

        arguments = "".join(
            "<{name}>{value}</{name}>".format(name=name, value=escape(str(value)))
            for name, value in self.parameters
        )
        return '<m:{action} xmlns:m="{scheme}">{arguments}</m:{action}>'.format(
            action=self.action_name,
            scheme=escape(self.namespace_uri, {'"': "&quot;"}),
            arguments=arguments
        )

    def __repr__(self) -> str:
        return f"SoapAction(action_name={self.action_name}, namespace_uri={self.namespace_uri}, parameters={self.parameters})"
