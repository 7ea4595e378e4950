"""Render one partial declaration per annotated target type."""

from __future__ import annotations

from pathlib import Path
import re
from typing import List, Optional, Sequence

from jinja2 import Environment, FileSystemLoader, StrictUndefined

from .. import csharp
from ..model.adapter import DeclarationModel
from ..models import Declaration, GenerationUnit, ResolvedMember

_DEFAULT_TEMPLATES = Path(__file__).resolve().parent.parent / "templates"
# Stands in for a default value while the body is indented.
_DEFAULT_SLOT = "\x00{index}\x00"
_DEFAULT_SLOT_PATTERN = re.compile(r"\x00(\d+)\x00")


class DeclarationEmitter:
    """Assembles generation units from resolved members using Jinja templates."""

    def __init__(
        self,
        model: DeclarationModel,
        *,
        field_prefix: str = "__",
        hint_suffix: str = "Defaults.g.cs",
        nullable: bool = True,
        auto_generated_header: bool = True,
        templates_dir: Path | None = None,
    ) -> None:
        self._model = model
        self.field_prefix = field_prefix
        self.hint_suffix = hint_suffix
        self.nullable = nullable
        self.auto_generated_header = auto_generated_header
        self._env = self._create_env(templates_dir)

    def emit(
        self,
        target: Declaration,
        resolved: Sequence[ResolvedMember],
        *,
        fingerprint: str = "",
        hint_name: str | None = None,
    ) -> Optional[GenerationUnit]:
        """Return the unit for ``target``, or None when nothing resolved."""
        if not resolved:
            return None

        blocks = [
            self._render_member(item, _DEFAULT_SLOT.format(index=index))
            for index, item in enumerate(resolved)
        ]
        body = self._render_type(csharp.partial_type_declaration(target), "\n\n".join(blocks))
        for outer in reversed(self.containing_headers(target)):
            body = self._render_type(outer, body)

        text = self._env.get_template("unit.cs.j2").render(
            auto_generated=self.auto_generated_header,
            nullable=self.nullable,
            namespace=target.namespace,
            body=body,
        )
        # Defaults go in last so multi-line literals keep their exact text.
        defaults = [item.default.text for item in resolved]
        text = _DEFAULT_SLOT_PATTERN.sub(lambda match: defaults[int(match.group(1))], text)
        if not text.endswith("\n"):
            text += "\n"
        return GenerationUnit(
            target=target.qualified_name,
            hint_name=hint_name or self.hint_name(target),
            text=text,
            fingerprint=fingerprint,
            members=[item.request.member.name for item in resolved],
        )

    def _render_member(self, item: ResolvedMember, default: str) -> str:
        member = item.request.member
        field_name = self.field_name(member.name)
        return self._env.get_template("member.cs.j2").render(
            static="static" in member.modifiers,
            type=member.type,
            field=field_name,
            default=default,
            declaration=csharp.partial_member_declaration(member),
            accessors=csharp.accessor_lines(member, field_name),
        )

    def field_name(self, member_name: str) -> str:
        return f"{self.field_prefix}{member_name}"

    def hint_name(self, declaration: Declaration, *, qualified: bool = False) -> str:
        stem = declaration.qualified_name if qualified else declaration.name
        if declaration.type_parameters:
            stem += f"_{len(declaration.type_parameters)}"
        return f"{stem}{self.hint_suffix}"

    def _render_type(self, header: str, body: str) -> str:
        return self._env.get_template("type.cs.j2").render(header=header, body=body)

    def containing_headers(self, target: Declaration) -> List[str]:
        """Partial headers of the types enclosing ``target``, outermost first."""
        headers: List[str] = []
        prefix = target.namespace
        for name in target.containing_types:
            qualified = f"{prefix}.{name}" if prefix else name
            outer = self._model.declaration_by_name(qualified)
            if outer is not None:
                headers.append(csharp.partial_type_declaration(outer))
            else:
                headers.append(f"partial class {csharp.escape_identifier(name)}")
            prefix = qualified
        return headers

    @staticmethod
    def _create_env(templates_dir: Path | None) -> Environment:
        directories = []
        if templates_dir:
            directories.append(str(templates_dir))
        directories.append(str(_DEFAULT_TEMPLATES))
        loader = FileSystemLoader(directories)
        return Environment(
            loader=loader,
            autoescape=False,
            trim_blocks=True,
            lstrip_blocks=True,
            undefined=StrictUndefined,
        )


__all__ = ["DeclarationEmitter"]
