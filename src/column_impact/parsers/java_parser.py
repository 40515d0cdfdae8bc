"""Tree-sitter based Java source parsing."""

import logging
import threading
from dataclasses import dataclass, field
from typing import Dict, Iterator, List, Optional

import tree_sitter_java
from tree_sitter import Language, Node, Parser

from ..exceptions import FileParseError

logger = logging.getLogger(__name__)

JAVA_LANGUAGE = Language(tree_sitter_java.language())

TYPE_DECLARATIONS = ("class_declaration", "interface_declaration")
ANNOTATION_NODES = ("annotation", "marker_annotation")
FIELD_NODES = ("field_declaration", "constant_declaration")


@dataclass
class Annotation:
    """An annotation use such as ``@Column(name = "user_email")``.

    ``arguments`` maps argument names to their values. String literals are
    unquoted; any other expression keeps its source text. A single unnamed
    argument is stored under ``value``.
    """
    name: str
    start_line: int
    arguments: Dict[str, str] = field(default_factory=dict)
    string_arguments: Dict[str, str] = field(default_factory=dict)

    def string_argument(self, *keys: str) -> Optional[str]:
        """First string-literal argument among ``keys``."""
        for key in keys:
            if key in self.string_arguments:
                return self.string_arguments[key]
        return None


@dataclass
class Parameter:
    """A formal parameter of a method."""
    name: str
    type_name: str


@dataclass
class Method:
    """A method declaration."""
    name: str
    start_line: int
    end_line: int
    parameters: List[Parameter]
    annotations: List[Annotation]
    text: str


@dataclass
class Field:
    """A field declaration, possibly declaring several variables."""
    names: List[str]
    type_name: str
    start_line: int
    annotations: List[Annotation]


@dataclass
class TypeDeclaration:
    """A class or interface declaration."""
    name: str
    kind: str  # 'class' or 'interface'
    start_line: int
    end_line: int
    annotations: List[Annotation]
    supertypes: List[str]
    fields: List[Field]
    methods: List[Method]

    @property
    def is_interface(self) -> bool:
        return self.kind == "interface"


@dataclass
class JavaSourceFile:
    """A parsed Java compilation unit.

    ``primary_type`` is the first class or interface found in the file.
    The ``all_*`` lists cover the whole file, nested types included, in
    source order.
    """
    file_path: str
    package_name: str
    primary_type: TypeDeclaration
    all_fields: List[Field]
    all_methods: List[Method]
    all_annotations: List[Annotation]


def _text(node: Optional[Node]) -> str:
    if node is None:
        return ""
    return node.text.decode("utf8")


def _line(node: Node) -> int:
    return node.start_point[0] + 1


def _walk(node: Node) -> Iterator[Node]:
    """Pre-order traversal over every node below ``node``."""
    stack = [node]
    while stack:
        current = stack.pop()
        yield current
        stack.extend(reversed(current.children))


def simple_type_name(type_text: str) -> str:
    """``org.springframework.data.jpa.repository.JpaRepository<User, Long>`` -> ``JpaRepository``."""
    base = type_text.split("<", 1)[0].strip()
    return base.rsplit(".", 1)[-1].strip()


def string_literal_value(node: Node) -> Optional[str]:
    """Value of a string literal or a concatenation of string literals."""
    if node.type == "string_literal":
        raw = _text(node)
        if raw.startswith('"""') and raw.endswith('"""') and len(raw) >= 6:
            return raw[3:-3]
        return raw[1:-1]
    if node.type == "parenthesized_expression" and node.named_child_count == 1:
        return string_literal_value(node.named_children[0])
    if node.type == "binary_expression":
        operator = node.child_by_field_name("operator")
        if operator is None or _text(operator) != "+":
            return None
        left = string_literal_value(node.child_by_field_name("left"))
        right = string_literal_value(node.child_by_field_name("right"))
        if left is None or right is None:
            return None
        return left + right
    return None


class JavaSourceParser:
    """Parses Java source into the declarations the impact engine needs.

    Tree-sitter parsers are not shared between threads; each thread gets its
    own parser instance.
    """

    def __init__(self):
        self._local = threading.local()

    @property
    def parser(self) -> Parser:
        parser = getattr(self._local, "parser", None)
        if parser is None:
            parser = Parser(JAVA_LANGUAGE)
            self._local.parser = parser
        return parser

    def parse(self, source: bytes, file_path: str = "") -> JavaSourceFile:
        """Parse file bytes, raising ``FileParseError`` on malformed input."""
        tree = self.parser.parse(source)
        root = tree.root_node

        if root.has_error:
            raise FileParseError(file_path, "syntax errors in source")

        package_name = ""
        primary = None
        all_fields: List[Field] = []
        all_methods: List[Method] = []
        all_annotations: List[Annotation] = []

        for node in _walk(root):
            if node.type == "package_declaration" and not package_name:
                package_name = self._package_name(node)
            elif node.type in TYPE_DECLARATIONS and primary is None:
                primary = self._type_declaration(node)
            elif node.type in FIELD_NODES:
                all_fields.append(self._field(node))
            elif node.type == "method_declaration":
                all_methods.append(self._method(node))
            elif node.type in ANNOTATION_NODES:
                all_annotations.append(self._annotation(node))

        if primary is None:
            raise FileParseError(file_path, "no class or interface declaration")

        return JavaSourceFile(
            file_path=file_path,
            package_name=package_name,
            primary_type=primary,
            all_fields=all_fields,
            all_methods=all_methods,
            all_annotations=all_annotations,
        )

    def _package_name(self, node: Node) -> str:
        for child in node.named_children:
            if child.type in ("scoped_identifier", "identifier"):
                return _text(child)
        return ""

    def _type_declaration(self, node: Node) -> TypeDeclaration:
        kind = "interface" if node.type == "interface_declaration" else "class"
        body = node.child_by_field_name("body")

        fields = []
        methods = []
        if body is not None:
            for member in body.named_children:
                if member.type in FIELD_NODES:
                    fields.append(self._field(member))
                elif member.type == "method_declaration":
                    methods.append(self._method(member))

        return TypeDeclaration(
            name=_text(node.child_by_field_name("name")),
            kind=kind,
            start_line=_line(node),
            end_line=node.end_point[0] + 1,
            annotations=self._modifier_annotations(node),
            supertypes=self._supertypes(node),
            fields=fields,
            methods=methods,
        )

    def _supertypes(self, node: Node) -> List[str]:
        """Simple names of extended and implemented types, in source order."""
        names = []
        for child in node.children:
            if child.type == "superclass":
                for type_node in child.named_children:
                    names.append(simple_type_name(_text(type_node)))
            elif child.type in ("super_interfaces", "extends_interfaces"):
                for type_list in child.named_children:
                    if type_list.type != "type_list":
                        continue
                    for type_node in type_list.named_children:
                        names.append(simple_type_name(_text(type_node)))
        return names

    def _modifier_annotations(self, node: Node) -> List[Annotation]:
        annotations = []
        for child in node.children:
            if child.type == "modifiers":
                for modifier in child.named_children:
                    if modifier.type in ANNOTATION_NODES:
                        annotations.append(self._annotation(modifier))
        return annotations

    def _field(self, node: Node) -> Field:
        names = []
        for declarator in node.children_by_field_name("declarator"):
            names.append(_text(declarator.child_by_field_name("name")))
        return Field(
            names=names,
            type_name=_text(node.child_by_field_name("type")),
            start_line=_line(node),
            annotations=self._modifier_annotations(node),
        )

    def _method(self, node: Node) -> Method:
        parameters = []
        params_node = node.child_by_field_name("parameters")
        if params_node is not None:
            for param in params_node.named_children:
                if param.type == "formal_parameter":
                    parameters.append(Parameter(
                        name=_text(param.child_by_field_name("name")),
                        type_name=_text(param.child_by_field_name("type")),
                    ))
                elif param.type == "spread_parameter":
                    declarator = next(
                        (c for c in param.named_children if c.type == "variable_declarator"), None
                    )
                    type_node = next(
                        (c for c in param.named_children
                         if c.type not in ("modifiers", "variable_declarator")), None
                    )
                    if declarator is not None:
                        parameters.append(Parameter(
                            name=_text(declarator.child_by_field_name("name")),
                            type_name=_text(type_node),
                        ))

        return Method(
            name=_text(node.child_by_field_name("name")),
            start_line=_line(node),
            end_line=node.end_point[0] + 1,
            parameters=parameters,
            annotations=self._modifier_annotations(node),
            text=_text(node),
        )

    def _annotation(self, node: Node) -> Annotation:
        name = simple_type_name(_text(node.child_by_field_name("name")))
        annotation = Annotation(name=name, start_line=_line(node))

        arguments = node.child_by_field_name("arguments")
        if arguments is None:
            return annotation

        for argument in arguments.named_children:
            if argument.type == "element_value_pair":
                key = _text(argument.child_by_field_name("key"))
                value = argument.child_by_field_name("value")
            elif argument.type in ("line_comment", "block_comment"):
                continue
            else:
                key = "value"
                value = argument
            if value is None:
                continue
            annotation.arguments[key] = _text(value)
            literal = string_literal_value(value)
            if literal is not None:
                annotation.string_arguments[key] = literal

        return annotation
