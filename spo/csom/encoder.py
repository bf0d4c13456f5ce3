"""
CSOM Action-Batch Encoder

Builds the XML body posted to /_vti_bin/client.svc/ProcessQuery.

A request has two sibling sections sharing one integer ID space:
    <ObjectPaths>  how to reach a server object (static method, method,
                   property, or an identity returned by an earlier batch)
    <Actions>      what to do with it (instantiate, query identity, load
                   properties, set a property)

IDs are chosen by the caller. The builder only checks that they are unique
and that every reference points at an object path added before it.

Example:
    batch = ActionBatch("my-app")
    batch.static_method(3, "GetTaxonomySession", TAXONOMY_SESSION_TYPE_ID)
    batch.method(6, 3, "GetDefaultSiteCollectionTermStore")
    batch.object_path(7, 6)
    batch.query(9, 6, select_all=True)
    body = batch.to_xml()
"""

from dataclasses import dataclass
from typing import Optional
from xml.sax.saxutils import escape, quoteattr

from spo.config import CSOM_LIBRARY_VERSION, CSOM_NAMESPACE, CSOM_SCHEMA_VERSION

PARAMETER_TYPES = ("String", "Guid", "Boolean")

XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}


def escape_xml(value: str) -> str:
    """Escape text for use inside an XML element or attribute."""
    return escape(str(value), XML_ENTITIES)


# =============================================================================
# PARAMETERS
# =============================================================================


@dataclass(frozen=True)
class Parameter:
    type: str
    value: object

    def __post_init__(self):
        if self.type not in PARAMETER_TYPES:
            raise ValueError(f"Unsupported parameter type: {self.type}")

    def encoded_value(self) -> str:
        if self.type == "Guid":
            return "{" + escape_xml(str(self.value).strip("{}")) + "}"
        if self.type == "Boolean":
            return "true" if self.value else "false"
        return escape_xml(self.value)

    def to_xml(self) -> str:
        return f'<Parameter Type="{self.type}">{self.encoded_value()}</Parameter>'


def string(value: str) -> Parameter:
    return Parameter("String", value)


def guid(value: str) -> Parameter:
    return Parameter("Guid", value)


def boolean(value: bool) -> Parameter:
    return Parameter("Boolean", value)


def _properties_xml(properties) -> str:
    if not properties:
        return "<Properties />"
    inner = "".join(
        f'<Property Name={quoteattr(name)} ScalarProperty="true" />' for name in properties
    )
    return f"<Properties>{inner}</Properties>"


def _parameters_xml(parameters) -> str:
    if not parameters:
        return ""
    return "<Parameters>" + "".join(p.to_xml() for p in parameters) + "</Parameters>"


# =============================================================================
# ACTION BATCH
# =============================================================================


class ActionBatch:
    """Ordered CSOM request: Actions plus the ObjectPaths they refer to."""

    def __init__(self, application_name: str):
        self.application_name = application_name
        self.actions: list[str] = []
        self.object_paths: list[str] = []
        self._ids: set[int] = set()
        self._path_ids: set[int] = set()

    # -------------------------------------------------------------------------
    # bookkeeping
    # -------------------------------------------------------------------------

    def _claim(self, id_: int):
        if id_ in self._ids:
            raise ValueError(f"Duplicate id {id_} in action batch")
        self._ids.add(id_)

    def _require_path(self, path_id: int):
        if path_id not in self._path_ids:
            raise ValueError(f"Object path {path_id} is not defined in this batch")

    def _add_path(self, id_: int, xml: str, parent_id: Optional[int] = None):
        if parent_id is not None:
            self._require_path(parent_id)
        self._claim(id_)
        self._path_ids.add(id_)
        self.object_paths.append(xml)
        return self

    def _add_action(self, id_: int, object_path_id: int, xml: str):
        self._require_path(object_path_id)
        self._claim(id_)
        self.actions.append(xml)
        return self

    # -------------------------------------------------------------------------
    # object paths
    # -------------------------------------------------------------------------

    def static_method(self, id_: int, name: str, type_id: str, parameters=()):
        xml = f"<StaticMethod Id=\"{id_}\" Name={quoteattr(name)} TypeId={quoteattr(type_id)}"
        params = _parameters_xml(parameters)
        xml += f">{params}</StaticMethod>" if params else " />"
        return self._add_path(id_, xml)

    def method(self, id_: int, parent_id: int, name: str, parameters=()):
        xml = f"<Method Id=\"{id_}\" ParentId=\"{parent_id}\" Name={quoteattr(name)}"
        params = _parameters_xml(parameters)
        xml += f">{params}</Method>" if params else " />"
        return self._add_path(id_, xml, parent_id)

    def property(self, id_: int, parent_id: int, name: str):
        xml = f"<Property Id=\"{id_}\" ParentId=\"{parent_id}\" Name={quoteattr(name)} />"
        return self._add_path(id_, xml, parent_id)

    def identity(self, id_: int, name: str):
        """Reference an object by the _ObjectIdentity_ an earlier batch returned."""
        xml = f"<Identity Id=\"{id_}\" Name={quoteattr(name)} />"
        return self._add_path(id_, xml)

    # -------------------------------------------------------------------------
    # actions
    # -------------------------------------------------------------------------

    def object_path(self, id_: int, object_path_id: int):
        xml = f"<ObjectPath Id=\"{id_}\" ObjectPathId=\"{object_path_id}\" />"
        return self._add_action(id_, object_path_id, xml)

    def identity_query(self, id_: int, object_path_id: int):
        xml = f"<ObjectIdentityQuery Id=\"{id_}\" ObjectPathId=\"{object_path_id}\" />"
        return self._add_action(id_, object_path_id, xml)

    def query(
        self,
        id_: int,
        object_path_id: int,
        properties=(),
        select_all: bool = False,
        child_properties=(),
        child_select_all: Optional[bool] = None,
    ):
        """Load properties of an object and, optionally, of its child items."""
        xml = (
            f"<Query Id=\"{id_}\" ObjectPathId=\"{object_path_id}\">"
            f"<Query SelectAllProperties=\"{str(select_all).lower()}\">"
            f"{_properties_xml(properties)}</Query>"
        )
        if child_select_all is not None:
            xml += (
                f"<ChildItemQuery SelectAllProperties=\"{str(child_select_all).lower()}\">"
                f"{_properties_xml(child_properties)}</ChildItemQuery>"
            )
        xml += "</Query>"
        return self._add_action(id_, object_path_id, xml)

    def set_property(self, id_: int, object_path_id: int, name: str, parameter: Parameter):
        xml = (
            f"<SetProperty Id=\"{id_}\" ObjectPathId=\"{object_path_id}\" Name={quoteattr(name)}>"
            f"{parameter.to_xml()}</SetProperty>"
        )
        return self._add_action(id_, object_path_id, xml)

    # -------------------------------------------------------------------------
    # serialization
    # -------------------------------------------------------------------------

    def to_xml(self) -> str:
        return (
            f"<Request AddExpandoFieldTypeSuffix=\"true\" SchemaVersion=\"{CSOM_SCHEMA_VERSION}\" "
            f"LibraryVersion=\"{CSOM_LIBRARY_VERSION}\" "
            f"ApplicationName={quoteattr(self.application_name)} xmlns=\"{CSOM_NAMESPACE}\">"
            f"<Actions>{''.join(self.actions)}</Actions>"
            f"<ObjectPaths>{''.join(self.object_paths)}</ObjectPaths>"
            f"</Request>"
        )
