"""
Inference engine

Drives the rule set over a partial tag record:

1. Calculation: repeated passes until a pass sets nothing
2. Fallback: the same, for tags still unset
3. Default: one pass, every remaining tag gets its default
4. Format: canonicalise every resolved value
5. Validate: collect TagWarnings per tag

Each pass of stages 1 and 2 evaluates every rule against a snapshot of the
record taken at the start of the pass, then applies all results together.
A rule never sees a value set by another rule in the same pass, so the
result does not depend on rule order. Every productive pass sets at least
one more tag, so both loops end within len(TagId) passes.
"""

from typing import Callable, Dict, Iterable, List, Optional, Set, Tuple

from loguru import logger

from ..osm.values import OsmValue
from ..state.containers import Atomic
from ..state.graph import DependencyGraph
from .rules import RULES, InferenceRule
from .tags import MergeWayTags, MergeWayTagsIn, TagId
from .warnings import TagWarning, WarningMap


class InferenceEngine:
    """
    Resolve partial tag records with a rule set

    Usage:
        engine = InferenceEngine()
        tags, inferred, warnings = engine.resolve(MergeWayTagsIn.from_osm_tags(raw))
    """

    def __init__(
        self,
        rules: Optional[Dict[TagId, InferenceRule]] = None,
        order: Optional[Iterable[TagId]] = None
    ):
        self.rules = dict(rules or RULES)
        self.order: List[TagId] = list(order) if order is not None else list(self.rules)
        missing = [tag for tag in self.rules if tag not in self.order]
        if missing:
            raise ValueError(f"Rule order is missing tags: {', '.join(t.value for t in missing)}")
        # the changed flag is a private store, not part of any shared graph
        self._graph = DependencyGraph("inference")

    def _rules_in_order(self) -> List[InferenceRule]:
        return [self.rules[tag] for tag in self.order if tag in self.rules]

    def _run_to_fixed_point(
        self,
        tags: MergeWayTagsIn,
        infer: Callable[[InferenceRule, MergeWayTagsIn], Optional[OsmValue]],
        inferred: Set[TagId],
        stage: str
    ) -> int:
        """
        Run passes of `infer` until a pass changes nothing

        Returns:
            Number of passes made
        """
        has_changed = Atomic(True, name=f"{stage}.changed", graph=self._graph)
        passes = 0
        while has_changed.get():
            has_changed.set(False)
            passes += 1
            snapshot = tags.copy()
            results: List[Tuple[TagId, OsmValue]] = []
            for rule in self._rules_in_order():
                value = infer(rule, snapshot)
                if value is not None:
                    results.append((rule.tag, value))
            for tag, value in results:
                tags.set(tag, value)
                inferred.add(tag)
                logger.debug(f"{stage}: {tag.value} = {value}")
            if results:
                has_changed.set(True)
        return passes

    def calculate(self, tags: MergeWayTagsIn, inferred: Optional[Set[TagId]] = None) -> Set[TagId]:
        """
        Run the calculation stage alone

        Returns:
            Tags set by this call
        """
        newly: Set[TagId] = set()
        self._run_to_fixed_point(tags, lambda rule, snap: rule.calculate(snap), newly, "calculate")
        if inferred is not None:
            inferred.update(newly)
        return newly

    def fallback(self, tags: MergeWayTagsIn, inferred: Optional[Set[TagId]] = None) -> Set[TagId]:
        """Run the fallback stage alone"""
        newly: Set[TagId] = set()
        self._run_to_fixed_point(tags, lambda rule, snap: rule.fallback(snap), newly, "fallback")
        if inferred is not None:
            inferred.update(newly)
        return newly

    def set_defaults(self, tags: MergeWayTagsIn, inferred: Optional[Set[TagId]] = None) -> Set[TagId]:
        """Give every still unset tag its default value"""
        newly: Set[TagId] = set()
        for rule in self._rules_in_order():
            if tags.is_set(rule.tag):
                continue
            tags.set(rule.tag, rule.default())
            newly.add(rule.tag)
        if inferred is not None:
            inferred.update(newly)
        return newly

    def infer(self, tags: MergeWayTagsIn) -> Set[TagId]:
        """
        Run calculation, fallback and default stages in place

        Args:
            tags: Partial record; every tag is set afterwards

        Returns:
            The tags that were inferred rather than present in the input
        """
        inferred: Set[TagId] = set()
        self.calculate(tags, inferred)
        self.fallback(tags, inferred)
        self.set_defaults(tags, inferred)
        return inferred

    def compile(self, tags: MergeWayTagsIn) -> MergeWayTags:
        """Resolve into MergeWayTags; raises MissingTagError if a tag is unset"""
        return MergeWayTags.compile(tags)

    def transform(self, tags: MergeWayTags) -> Tuple[MergeWayTags, WarningMap]:
        """
        Format then validate a resolved record

        Every rule formats against the same unformatted siblings. Validation
        runs on the formatted record. `tags` itself is left untouched.

        Returns:
            (formatted record, TagId -> warnings for tags with at least one warning)
        """
        rules = self._rules_in_order()
        replacements: Dict[TagId, OsmValue] = {}
        for rule in rules:
            formatted_value = rule.format_value(tags)
            if formatted_value is not None:
                replacements[rule.tag] = formatted_value
        formatted = tags.replace(replacements)

        warning_map: WarningMap = {}
        for rule in rules:
            warnings: Set[TagWarning] = set()
            rule.validate_value(formatted, warnings)
            if warnings:
                warning_map[rule.tag] = warnings
        return formatted, warning_map

    def resolve(self, tags: MergeWayTagsIn) -> Tuple[MergeWayTags, Set[TagId], WarningMap]:
        """Infer, compile, format and validate in one call"""
        inferred = self.infer(tags)
        resolved = self.compile(tags)
        formatted, warnings = self.transform(resolved)
        return formatted, inferred, warnings
