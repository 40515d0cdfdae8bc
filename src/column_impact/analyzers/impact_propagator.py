"""Impact Propagator - Finds directly and indirectly impacted classes for a column."""

import logging
import time
from dataclasses import dataclass, field
from datetime import datetime
from typing import Dict, List, Optional

import networkx as nx

from ..config import AnalysisConfiguration
from ..core.project_scanner import ProjectScanner
from ..exceptions import ColumnImpactError
from ..parsers.java_parser import JavaSourceParser
from .class_classifier import IMPACT_ROLES, ClassClassifier, LayerRole, SourceUnit
from .usage_detector import UsageDetector, UsageRecord

logger = logging.getLogger(__name__)

INDIRECT_REPOSITORY_REASON = "Indirect: Uses impacted repository"
INDIRECT_SERVICE_REASON = "Indirect: Uses impacted service"


@dataclass
class AnalysisResult:
    """Impacted classes and column usages for one analysis run."""
    column_name: str
    project_path: str = ""
    repositories: List[SourceUnit] = field(default_factory=list)
    entities: List[SourceUnit] = field(default_factory=list)
    services: List[SourceUnit] = field(default_factory=list)
    controllers: List[SourceUnit] = field(default_factory=list)
    usages: List[UsageRecord] = field(default_factory=list)
    elapsed_millis: int = 0
    timestamp: datetime = field(default_factory=datetime.now)
    classes_by_role: Dict[str, int] = field(default_factory=dict)
    # Nodes are qualified class names; edges point from a dependent unit to
    # the impacted unit it uses
    impact_graph: nx.DiGraph = field(default_factory=nx.DiGraph)

    def units_for(self, role: LayerRole) -> Optional[List[SourceUnit]]:
        """The result category for a role, ``None`` for roles that are not tracked."""
        return {
            LayerRole.REPOSITORY: self.repositories,
            LayerRole.ENTITY: self.entities,
            LayerRole.SERVICE: self.services,
            LayerRole.CONTROLLER: self.controllers,
        }.get(role)

    def is_impacted(self, unit: SourceUnit) -> bool:
        """True if a unit with the same simple name is already in the unit's category."""
        category = self.units_for(unit.role)
        if category is None:
            return False
        return any(impacted.name == unit.name for impacted in category)

    def add_unit(self, unit: SourceUnit) -> bool:
        """Append a unit to its role's category. Returns False for untracked roles.

        No de-duplication happens here; classes sharing a simple name in
        different packages are distinct units.
        """
        category = self.units_for(unit.role)
        if category is None:
            return False
        category.append(unit)
        self.impact_graph.add_node(unit.qualified_name, name=unit.name, role=unit.role.value,
                                   reason=unit.impact_reason)
        return True

    def add_usage(self, usage: UsageRecord):
        self.usages.append(usage)

    @property
    def total_impacted_classes(self) -> int:
        return len(self.repositories) + len(self.entities) + len(self.services) + len(self.controllers)

    @property
    def total_usages(self) -> int:
        return len(self.usages)

    def impact_chains(self) -> List[List[str]]:
        """Paths from each top-level impacted unit down to the units it depends on.

        A top-level unit is one nothing else was found to depend on. Units
        without dependencies form single-element chains.
        """
        graph = self.impact_graph
        chains = []
        for source in graph.nodes:
            if graph.in_degree(source) > 0:
                continue
            sinks = [n for n in nx.descendants(graph, source) if graph.out_degree(n) == 0]
            if not sinks:
                chains.append([source])
                continue
            for sink in sorted(sinks):
                chains.extend(nx.all_simple_paths(graph, source, sink))
        return chains

    def to_dict(self) -> dict:
        return {
            'column_name': self.column_name,
            'project_path': self.project_path,
            'timestamp': self.timestamp.isoformat(),
            'elapsed_millis': self.elapsed_millis,
            'summary': {
                'repositories': len(self.repositories),
                'entities': len(self.entities),
                'services': len(self.services),
                'controllers': len(self.controllers),
                'total_impacted_classes': self.total_impacted_classes,
                'total_usages': self.total_usages,
                'classes_by_role': dict(self.classes_by_role),
            },
            'repositories': [unit.to_dict() for unit in self.repositories],
            'entities': [unit.to_dict() for unit in self.entities],
            'services': [unit.to_dict() for unit in self.services],
            'controllers': [unit.to_dict() for unit in self.controllers],
            'usages': [usage.to_dict() for usage in self.usages],
            'impact_chains': self.impact_chains(),
        }


def _references_any(unit: SourceUnit, content: str, impacted: List[SourceUnit],
                    layer_suffix: str) -> List[SourceUnit]:
    """Impacted units the unit refers to, by raw text or by field name overlap.

    A field overlaps when its lower-cased name contains the impacted name
    lower-cased with ``layer_suffix`` removed (``UserRepository`` -> ``user``).
    """
    matched = []
    for target in impacted:
        if target.name in content:
            matched.append(target)
            continue
        stem = target.name.lower().replace(layer_suffix, "")
        if stem and any(stem in field_name.lower() for field_name in unit.fields):
            matched.append(target)
    return matched


class ImpactPropagator:
    """Runs discovery, the direct-impact pass and the indirect-impact pass."""

    def __init__(self, config: Optional[AnalysisConfiguration] = None):
        self.config = config or AnalysisConfiguration()
        parser = JavaSourceParser()
        self.scanner = ProjectScanner(self.config)
        self.classifier = ClassClassifier(parser, self.config.known_base_repositories)
        self.detector = UsageDetector(parser, self.config.encoding)

    def analyze(self, project_path: str, column_name: str) -> AnalysisResult:
        """Trace the impact of ``column_name`` across ``project_path``.

        Inputs are assumed valid; see ``ColumnImpactAnalyzer`` for validation.
        """
        logger.info("Starting impact analysis for column: %s in project: %s", column_name, project_path)
        start_time = time.time()
        result = AnalysisResult(column_name=column_name, project_path=project_path)

        units = self.discover(project_path)
        logger.info("Found %d classes to analyze", len(units))

        if not units:
            logger.warning("No Java classes found in path: %s", project_path)
            result.elapsed_millis = int((time.time() - start_time) * 1000)
            return result

        by_role = self._group_by_role(units)
        result.classes_by_role = {role.value: len(members) for role, members in by_role.items()}
        logger.info("Class breakdown - Repositories: %d, Entities: %d, Services: %d, Controllers: %d",
                    len(by_role[LayerRole.REPOSITORY]), len(by_role[LayerRole.ENTITY]),
                    len(by_role[LayerRole.SERVICE]), len(by_role[LayerRole.CONTROLLER]))

        self.apply_direct_impacts(units, column_name, result)
        self.apply_indirect_impacts(by_role, result)

        result.elapsed_millis = int((time.time() - start_time) * 1000)
        logger.info("Impact analysis completed in %dms. Found %d repositories, %d entities, "
                    "%d services, %d controllers",
                    result.elapsed_millis, len(result.repositories), len(result.entities),
                    len(result.services), len(result.controllers))
        return result

    def discover(self, project_path: str) -> List[SourceUnit]:
        """Classify every source file under the project, dropping files that fail."""
        def classify(file_path: str) -> Optional[SourceUnit]:
            try:
                return self.classifier.classify_file(file_path, project_root=project_path)
            except ColumnImpactError as e:
                logger.warning("Skipping %s: %s", file_path, e)
                return None

        files = self.scanner.find_source_files(project_path)
        logger.info("Parsing %d source files", len(files))
        return [unit for unit in self.scanner.map_files(classify, files) if unit is not None]

    def apply_direct_impacts(self, units: List[SourceUnit], column_name: str,
                             result: AnalysisResult):
        """Mark every unit with at least one usage record as directly impacted."""
        def detect(unit: SourceUnit) -> List[UsageRecord]:
            return self.detector.find_usages(unit.file_path, column_name)

        for unit, usages in zip(units, self.scanner.map_files(detect, units)):
            if not usages:
                continue

            unit.impact_reason = f"Direct usage: {len(usages)} occurrence(s)"
            unit.usage_count = len(usages)
            if unit.role in IMPACT_ROLES:
                result.add_unit(unit)
            else:
                logger.debug("Untracked class type: %s for class: %s", unit.role.value, unit.name)

            for usage in usages:
                result.add_usage(usage)

    def apply_indirect_impacts(self, by_role: Dict[LayerRole, List[SourceUnit]],
                               result: AnalysisResult):
        """One hop each: services using impacted repositories, then controllers using impacted services."""
        self._propagate(by_role[LayerRole.SERVICE], list(result.repositories), "repository",
                        INDIRECT_REPOSITORY_REASON, result)
        self._propagate(by_role[LayerRole.CONTROLLER], list(result.services), "service",
                        INDIRECT_SERVICE_REASON, result)

    def _propagate(self, candidates: List[SourceUnit], impacted: List[SourceUnit],
                   layer_suffix: str, reason: str, result: AnalysisResult):
        if not impacted:
            return

        for unit in candidates:
            # Matched by simple name against the unit's category
            if result.is_impacted(unit):
                continue
            try:
                with open(unit.file_path, 'r', encoding=self.config.encoding, errors='replace') as f:
                    content = f.read()
            except OSError as e:
                logger.debug("Could not check %s usage for %s: %s", layer_suffix, unit.name, e)
                continue

            used = _references_any(unit, content, impacted, layer_suffix)
            if not used:
                continue

            unit.impact_reason = reason
            result.add_unit(unit)
            for target in used:
                result.impact_graph.add_edge(unit.qualified_name, target.qualified_name, type="uses")

    @staticmethod
    def _group_by_role(units: List[SourceUnit]) -> Dict[LayerRole, List[SourceUnit]]:
        grouped: Dict[LayerRole, List[SourceUnit]] = {role: [] for role in LayerRole}
        for unit in units:
            grouped[unit.role].append(unit)
        return grouped
