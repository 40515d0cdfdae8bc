"""Class Classifier - Assigns each Java source file an architectural layer role."""

import logging
import os
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, FrozenSet, List, Optional, Sequence, Tuple

from ..exceptions import FileReadError
from ..parsers.java_parser import Annotation, JavaSourceFile, JavaSourceParser, Method

logger = logging.getLogger(__name__)


class LayerRole(Enum):
    """Architectural layer of a source unit."""
    REPOSITORY = "Repository"
    ENTITY = "Entity"
    SERVICE = "Service"
    CONTROLLER = "Controller"
    CONFIGURATION = "Configuration"
    COMPONENT = "Component"
    UNKNOWN = "Unknown"


IMPACT_ROLES = (LayerRole.REPOSITORY, LayerRole.ENTITY, LayerRole.SERVICE, LayerRole.CONTROLLER)


@dataclass
class SourceUnit:
    """One classified source file."""
    name: str
    package_path: str
    file_path: str
    role: LayerRole
    methods: List[str] = field(default_factory=list)
    fields: List[str] = field(default_factory=list)
    annotations: List[str] = field(default_factory=list)
    routes: List[str] = field(default_factory=list)  # controllers only
    impact_reason: Optional[str] = None
    usage_count: int = 0
    project_root: Optional[str] = None

    @property
    def qualified_name(self) -> str:
        return f"{self.package_path}.{self.name}" if self.package_path else self.name

    @property
    def short_file_path(self) -> str:
        """File path relative to the analysed project root, when known."""
        if self.project_root:
            try:
                return os.path.relpath(self.file_path, self.project_root)
            except ValueError:
                return self.file_path
        return self.file_path

    def to_dict(self) -> dict:
        return {
            'name': self.name,
            'package': self.package_path,
            'file_path': self.file_path,
            'role': self.role.value,
            'methods': list(self.methods),
            'fields': list(self.fields),
            'annotations': list(self.annotations),
            'routes': list(self.routes),
            'impact_reason': self.impact_reason,
            'usage_count': self.usage_count,
        }


ANNOTATION_ROLES = {
    "Repository": LayerRole.REPOSITORY,
    "Entity": LayerRole.ENTITY,
    "Table": LayerRole.ENTITY,
    "Service": LayerRole.SERVICE,
    "Controller": LayerRole.CONTROLLER,
    "RestController": LayerRole.CONTROLLER,
    "Component": LayerRole.COMPONENT,
    "Configuration": LayerRole.CONFIGURATION,
}

# Checked in order against a lower-cased package path; the file name rules
# are the same minus configuration.
NAMESPACE_PATTERNS: Tuple[Tuple[Tuple[str, ...], LayerRole], ...] = (
    (("repository",), LayerRole.REPOSITORY),
    (("entity", "model"), LayerRole.ENTITY),
    (("service",), LayerRole.SERVICE),
    (("controller", "web"), LayerRole.CONTROLLER),
    (("config",), LayerRole.CONFIGURATION),
)

FILE_NAME_PATTERNS = tuple(
    (needles, role) for needles, role in NAMESPACE_PATTERNS
    if role is not LayerRole.CONFIGURATION
)

VERB_MAPPINGS = {
    "GetMapping": "GET",
    "PostMapping": "POST",
    "PutMapping": "PUT",
    "DeleteMapping": "DELETE",
    "PatchMapping": "PATCH",
}
GENERIC_MAPPING = "RequestMapping"


@dataclass
class ClassificationInput:
    """Everything a classification rule may look at."""
    parsed: JavaSourceFile
    file_name: str
    known_base_repositories: FrozenSet[str]


ClassificationRule = Callable[[ClassificationInput], Optional[LayerRole]]


def _role_from_annotations(source: ClassificationInput) -> Optional[LayerRole]:
    for annotation in source.parsed.primary_type.annotations:
        role = ANNOTATION_ROLES.get(annotation.name)
        if role is not None:
            return role
    return None


def _match_patterns(text: str, patterns) -> Optional[LayerRole]:
    lowered = text.lower()
    for needles, role in patterns:
        if any(needle in lowered for needle in needles):
            return role
    return None


def _role_from_namespace(source: ClassificationInput) -> Optional[LayerRole]:
    return _match_patterns(source.parsed.package_name, NAMESPACE_PATTERNS)


def _role_from_file_name(source: ClassificationInput) -> Optional[LayerRole]:
    return _match_patterns(source.file_name, FILE_NAME_PATTERNS)


def _role_from_supertypes(source: ClassificationInput) -> Optional[LayerRole]:
    declaration = source.parsed.primary_type
    if not declaration.is_interface:
        return None
    for supertype in declaration.supertypes:
        if "Repository" in supertype or supertype in source.known_base_repositories:
            return LayerRole.REPOSITORY
    return None


# First match wins.
CLASSIFICATION_RULES: Sequence[ClassificationRule] = (
    _role_from_annotations,
    _role_from_namespace,
    _role_from_file_name,
    _role_from_supertypes,
)


def _endpoint_path(annotation: Annotation, method_name: str) -> str:
    path = annotation.string_argument("value", "path")
    if not path:
        path = "/" + method_name.lower()
    return path


def extract_routes(method: Method) -> List[str]:
    """``"VERB PATH"`` descriptors declared by a controller method's mapping annotations."""
    routes = []
    for annotation in method.annotations:
        if annotation.name in VERB_MAPPINGS:
            routes.append(f"{VERB_MAPPINGS[annotation.name]} {_endpoint_path(annotation, method.name)}")
        elif annotation.name == GENERIC_MAPPING:
            http_method = annotation.arguments.get("method", "ALL").replace("RequestMethod.", "")
            routes.append(f"{http_method} {_endpoint_path(annotation, method.name)}")
    return routes


class ClassClassifier:
    """Classifies parsed Java files into layer roles."""

    def __init__(self, parser: Optional[JavaSourceParser] = None,
                 known_base_repositories: Optional[FrozenSet[str]] = None):
        self.parser = parser or JavaSourceParser()
        self.known_base_repositories = known_base_repositories or frozenset({"JpaRepository", "CrudRepository"})

    def classify_file(self, file_path: str, project_root: Optional[str] = None) -> SourceUnit:
        """Read, parse and classify one file.

        Raises ``FileReadError`` or ``FileParseError``; callers decide whether
        to skip the file.
        """
        try:
            source = Path(file_path).read_bytes()
        except OSError as e:
            raise FileReadError(str(file_path), str(e)) from e

        parsed = self.parser.parse(source, str(file_path))
        unit = self.classify(parsed, os.path.basename(file_path))
        unit.project_root = project_root
        return unit

    def determine_role(self, parsed: JavaSourceFile, file_name: str) -> LayerRole:
        source = ClassificationInput(
            parsed=parsed,
            file_name=file_name,
            known_base_repositories=self.known_base_repositories,
        )
        for rule in CLASSIFICATION_RULES:
            role = rule(source)
            if role is not None:
                return role
        return LayerRole.UNKNOWN

    def classify(self, parsed: JavaSourceFile, file_name: str) -> SourceUnit:
        """Build a ``SourceUnit`` from an already parsed file."""
        declaration = parsed.primary_type
        role = self.determine_role(parsed, file_name)

        unit = SourceUnit(
            name=declaration.name,
            package_path=parsed.package_name,
            file_path=parsed.file_path,
            role=role,
        )
        unit.annotations = [annotation.name for annotation in declaration.annotations]
        for declared_field in declaration.fields:
            unit.fields.extend(declared_field.names)
        for method in declaration.methods:
            unit.methods.append(method.name)
            if role is LayerRole.CONTROLLER:
                unit.routes.extend(extract_routes(method))

        logger.debug("Classified %s as %s", unit.name, role.value)
        return unit
