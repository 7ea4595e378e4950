"""Find members carrying the default-copy marker."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List

from ..diagnostics import ANNOTATION_USAGE, Diagnostic, Severity
from ..model.adapter import DeclarationModel
from ..models import AnnotatedMember, Annotation, Declaration, Member


@dataclass
class Discovery:
    """Annotated members found by a scan plus markers that were misused."""

    requests: List[AnnotatedMember] = field(default_factory=list)
    diagnostics: List[Diagnostic] = field(default_factory=list)


class AnnotationDiscoverer:
    """Scans declarations for members annotated with the synthesis marker."""

    def __init__(self, model: DeclarationModel, marker: str = "UseDefaultFrom") -> None:
        self._model = model
        self._marker = marker

    def discover(self, declarations: Iterable[Declaration] | None = None) -> Discovery:
        result = Discovery()
        targets = self._model.declarations() if declarations is None else declarations
        for declaration in targets:
            for member in declaration.members:
                self._scan_member(declaration, member, result)
        return result

    def is_marker(self, annotation: Annotation) -> bool:
        name = annotation.marker.split("<", 1)[0].rpartition(".")[2]
        return name in (self._marker, f"{self._marker}Attribute")

    def _scan_member(self, declaration: Declaration, member: Member, result: Discovery) -> None:
        for annotation in self._model.annotations_on(member):
            if not self.is_marker(annotation):
                continue
            if len(annotation.type_arguments) != 1 or len(annotation.arguments) != 1:
                result.diagnostics.append(
                    Diagnostic(
                        code=ANNOTATION_USAGE,
                        severity=Severity.ERROR,
                        message=(
                            f"{self._marker} expects one type argument and one member name, got "
                            f"{len(annotation.type_arguments)} and {len(annotation.arguments)}."
                        ),
                        target=declaration.qualified_name,
                        member=member.name,
                        location=member.location,
                    )
                )
                continue
            result.requests.append(
                AnnotatedMember(
                    target=declaration,
                    member=member,
                    source_type=annotation.type_arguments[0],
                    source_member_name=annotation.arguments[0],
                    annotation=annotation,
                )
            )


__all__ = ["AnnotationDiscoverer", "Discovery"]
