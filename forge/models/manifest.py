"""
forge/models/manifest.py -- Typed manifest models.

The manifest JSON is parsed into these frozen models once per locale, so
extraction and search operate on guaranteed-shaped data.  Shape problems
(missing fields, duplicate section names, wrong phase count or ids) fail
at load time with a ``pydantic.ValidationError``.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

PHASE_COUNT = 9
OVERVIEW_SECTION = "overview"


class SectionDescriptor(BaseModel):
    """A named section of a phase, located by its level-3 heading."""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=1)
    heading: str = Field(min_length=1)

    @property
    def marker(self) -> str:
        return f"### {self.heading}"


class PhaseDescriptor(BaseModel):
    model_config = ConfigDict(frozen=True)

    id: int
    name: str
    description: str = ""
    sections: tuple[SectionDescriptor, ...] = ()

    @field_validator("sections")
    @classmethod
    def _unique_section_names(cls, sections):
        seen: set[str] = set()
        for section in sections:
            if section.name in seen:
                raise ValueError(f"duplicate section name '{section.name}'")
            seen.add(section.name)
        return sections

    @property
    def section_names(self) -> list[str]:
        return [s.name for s in self.sections]

    def find_section(self, name: str) -> SectionDescriptor | None:
        for section in self.sections:
            if section.name == name:
                return section
        return None

    def section_for_heading(self, heading: str) -> SectionDescriptor | None:
        for section in self.sections:
            if section.heading == heading:
                return section
        return None


class Manifest(BaseModel):
    """Ordered description of all nine phases (``phases[i].id == i``)."""

    model_config = ConfigDict(frozen=True)

    phases: tuple[PhaseDescriptor, ...]

    @model_validator(mode="after")
    def _check_phase_ids(self):
        if len(self.phases) != PHASE_COUNT:
            raise ValueError(
                f"manifest must declare exactly {PHASE_COUNT} phases, got {len(self.phases)}"
            )
        for index, phase in enumerate(self.phases):
            if phase.id != index:
                raise ValueError(f"phases[{index}] has id {phase.id}, expected {index}")
        return self

    def phase(self, phase_id: int) -> PhaseDescriptor:
        return self.phases[phase_id]
