"""Pass orchestration: discovery, per-target resolution, caching and emission."""

from __future__ import annotations

from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
import hashlib
import json
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Set, Tuple

from . import csharp
from .config import SynthConfig
from .diagnostics import DUPLICATE_ANNOTATION, Diagnostic, Severity, SynthesisError
from .logging import get_logger, log_diagnostics
from .model.adapter import DeclarationModel
from .models import AnnotatedMember, Declaration, GenerationUnit, ResolvedMember
from .pipeline import (
    AnnotationDiscoverer,
    DeclarationEmitter,
    DefaultExtractor,
    ExpressionReconstructor,
    MemberResolver,
)
from .stores import UnitCache


@dataclass
class GenerationResult:
    """Everything one pass produced."""

    units: List[GenerationUnit] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)
    recomputed: List[str] = field(default_factory=list)
    reused: List[str] = field(default_factory=list)

    @property
    def has_errors(self) -> bool:
        return any(diagnostic.severity is Severity.ERROR for diagnostic in self.diagnostics)


@dataclass
class _TargetOutcome:
    target: Declaration
    hint_name: str
    resolved: List[ResolvedMember]
    diagnostics: List[Diagnostic]
    fingerprint: str
    unit: Optional[GenerationUnit] = None
    reused: bool = False


class SynthesisEngine:
    """Runs the pipeline over a declaration model, once or incrementally.

    Without a cache every pass rebuilds every unit. With a ``UnitCache`` a
    target is re-rendered only when its fingerprint changes; otherwise the
    cached unit is returned unchanged.
    """

    def __init__(
        self,
        config: SynthConfig | None = None,
        *,
        cache: UnitCache | None = None,
        max_workers: int | None = None,
        templates_dir: Path | None = None,
    ) -> None:
        self.config = config or SynthConfig(root=Path.cwd())
        self.cache = cache
        self.max_workers = max_workers if max_workers is not None else self.config.max_workers
        self.templates_dir = templates_dir
        self.logger = get_logger("engine")

    @classmethod
    def from_config(cls, config: SynthConfig, *, incremental: bool | None = None) -> "SynthesisEngine":
        use_cache = config.incremental if incremental is None else incremental
        cache = UnitCache(config.cache_path) if use_cache else None
        return cls(config, cache=cache)

    @property
    def incremental(self) -> bool:
        return self.cache is not None

    def run(self, model: DeclarationModel) -> GenerationResult:
        mode = "incremental" if self.incremental else "one-shot"
        self.logger.info("Starting %s synthesis pass", mode)

        discovery = AnnotationDiscoverer(model, self.config.marker).discover()
        groups = self._group_by_target(discovery.requests)
        self.logger.debug(
            "Discovered %d annotated member(s) on %d target(s)", len(discovery.requests), len(groups)
        )

        emitter = DeclarationEmitter(
            model,
            field_prefix=self.config.field_prefix,
            hint_suffix=self.config.hint_suffix,
            nullable=self.config.nullable,
            auto_generated_header=self.config.auto_generated_header,
            templates_dir=self.templates_dir,
        )
        hint_names = self._assign_hint_names(emitter, [target for target, _ in groups])
        resolver = MemberResolver(model)
        extractor = DefaultExtractor(model)
        reconstructor = ExpressionReconstructor(
            model,
            implicit_default=self.config.implicit_default,
            global_qualifier=self.config.global_qualifier,
        )

        def process(group: Tuple[Declaration, List[AnnotatedMember]]) -> _TargetOutcome:
            target, requests = group
            outcome = self._resolve_target(
                target,
                requests,
                hint_names[target.qualified_name],
                emitter.containing_headers(target),
                resolver,
                extractor,
                reconstructor,
            )
            self._render(outcome, emitter)
            return outcome

        if self.max_workers > 1 and len(groups) > 1:
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                outcomes = list(executor.map(process, groups))
        else:
            outcomes = [process(group) for group in groups]

        result = GenerationResult(diagnostics=list(discovery.diagnostics))
        for outcome in outcomes:
            result.diagnostics.extend(outcome.diagnostics)
            key = outcome.target.qualified_name
            if outcome.unit is None:
                if self.cache is not None:
                    self.cache.discard(key)
                continue
            result.units.append(outcome.unit)
            if outcome.reused:
                result.reused.append(key)
            else:
                result.recomputed.append(key)
                if self.cache is not None:
                    self.cache.store(key, signature=self._signature(outcome.hint_name), unit=outcome.unit)

        if self.cache is not None:
            self.cache.prune(unit.target for unit in result.units)
            self.cache.persist()

        log_diagnostics(self.logger, result.diagnostics)
        self.logger.info(
            "Synthesis pass finished: %d unit(s), %d recomputed, %d reused, %d diagnostic(s)",
            len(result.units),
            len(result.recomputed),
            len(result.reused),
            len(result.diagnostics),
        )
        return result

    # ------------------------------------------------------------------
    # Internal helpers

    @staticmethod
    def _group_by_target(
        requests: Sequence[AnnotatedMember],
    ) -> List[Tuple[Declaration, List[AnnotatedMember]]]:
        grouped: Dict[str, Tuple[Declaration, List[AnnotatedMember]]] = {}
        for request in requests:
            key = request.target.qualified_name
            if key not in grouped:
                grouped[key] = (request.target, [])
            grouped[key][1].append(request)
        return list(grouped.values())

    @staticmethod
    def _assign_hint_names(emitter: DeclarationEmitter, targets: Sequence[Declaration]) -> Dict[str, str]:
        counts = Counter(emitter.hint_name(target) for target in targets)
        return {
            target.qualified_name: emitter.hint_name(
                target, qualified=counts[emitter.hint_name(target)] > 1
            )
            for target in targets
        }

    def _resolve_target(
        self,
        target: Declaration,
        requests: Sequence[AnnotatedMember],
        hint_name: str,
        containing: Sequence[str],
        resolver: MemberResolver,
        extractor: DefaultExtractor,
        reconstructor: ExpressionReconstructor,
    ) -> _TargetOutcome:
        resolved: List[ResolvedMember] = []
        diagnostics: List[Diagnostic] = []
        emitted: Set[str] = set()
        for request in requests:
            member_name = request.member.name
            if member_name in emitted:
                diagnostics.append(
                    Diagnostic(
                        code=DUPLICATE_ANNOTATION,
                        severity=Severity.WARNING,
                        message=(
                            f"'{member_name}' already takes its default from another annotation; "
                            f"'{request.source_type.name}.{request.source_member_name}' is ignored."
                        ),
                        target=target.qualified_name,
                        member=member_name,
                        location=request.member.location,
                    )
                )
                continue
            try:
                source_type, source_member = resolver.resolve(
                    request.source_type, request.source_member_name
                )
                default = reconstructor.reconstruct(extractor.extract(source_member))
            except SynthesisError as exc:
                diagnostics.append(exc.to_diagnostic(request))
                continue
            resolved.append(
                ResolvedMember(request=request, source_type=source_type.qualified_name, default=default)
            )
            emitted.add(member_name)

        return _TargetOutcome(
            target=target,
            hint_name=hint_name,
            resolved=resolved,
            diagnostics=diagnostics,
            fingerprint=self._fingerprint(target, containing, resolved),
        )

    def _render(self, outcome: _TargetOutcome, emitter: DeclarationEmitter) -> None:
        if not outcome.resolved:
            return
        key = outcome.target.qualified_name
        if self.cache is not None:
            cached = self.cache.get(
                key, signature=self._signature(outcome.hint_name), fingerprint=outcome.fingerprint
            )
            if cached is not None:
                self.logger.debug("Cache hit for %s", key)
                outcome.unit = cached
                outcome.reused = True
                return
            self.logger.debug("Cache miss for %s", key)
        outcome.unit = emitter.emit(
            outcome.target,
            outcome.resolved,
            fingerprint=outcome.fingerprint,
            hint_name=outcome.hint_name,
        )

    def _signature(self, hint_name: str) -> str:
        templates = str(self.templates_dir.resolve()) if self.templates_dir else ""
        return f"{self.config.render_signature()}|{templates}|{hint_name}"

    @staticmethod
    def _fingerprint(
        target: Declaration, containing: Sequence[str], resolved: Sequence[ResolvedMember]
    ) -> str:
        payload = {
            "target": target.qualified_name,
            "signature": csharp.partial_type_declaration(target),
            "containing": list(containing),
            "members": [
                {
                    "declaration": csharp.partial_member_declaration(item.request.member),
                    "accessors": list(item.request.member.accessors),
                    "static": "static" in item.request.member.modifiers,
                    "source_type": item.request.source_type.name,
                    "declared_on": item.source_type,
                    "source_member": item.request.source_member_name,
                    "default": item.default.text,
                }
                for item in resolved
            ],
        }
        encoded = json.dumps(payload, sort_keys=True).encode("utf-8")
        return hashlib.sha256(encoded).hexdigest()


__all__ = ["GenerationResult", "SynthesisEngine"]
