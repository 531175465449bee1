"""
complaints.registry — One entry per complaint type.

Everything that varies by ``complaint_type`` is declared here once:

* which detail model stores the category fields,
* which serializer validates / renders them,
* how a complaint is labelled in listings (``display_name``,
  ``brief_info``) and in the search-by-BI results,
* the "next steps" checklist shown while the complaint is being
  investigated.

Services, serializers and the core search endpoints all go through
``get_handler``; nothing else switches on the type string.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Callable

from django.db import models

from .models import (
    CommonCrimeDetails,
    Complaint,
    ComplaintType,
    CorruptionDetails,
    CyberCrimeDetails,
    DomesticViolenceDetails,
    MissingPersonDetails,
)
from .serializers import (
    CommonCrimeDetailsSerializer,
    CorruptionDetailsSerializer,
    CyberCrimeDetailsSerializer,
    DomesticViolenceDetailsSerializer,
    MissingPersonDetailsSerializer,
)

Labeller = Callable[[Any, Complaint], str]

DEFAULT_NEXT_STEPS: tuple[str, ...] = (
    "Recolha de provas adicionais",
    "Entrevistas com testemunhas",
    "Análise técnica das evidências",
)

MISSING_PERSON_NEXT_STEPS: tuple[str, ...] = (
    "Busca nas áreas frequentadas pela pessoa",
    "Contacto com familiares e amigos",
    "Verificação em hospitais e centros de saúde",
    "Divulgação da foto nos postos policiais",
)


@dataclass(frozen=True)
class ComplaintTypeHandler:
    complaint_type: str
    detail_model: type[models.Model]
    detail_serializer: type
    display_name: Labeller
    brief_info: Labeller
    search_description: str
    next_steps: tuple[str, ...] = field(default=DEFAULT_NEXT_STEPS)

    @property
    def accessor(self) -> str:
        """Reverse one-to-one accessor on ``Complaint`` for the detail row."""
        return self.detail_model._meta.model_name

    def relationship(self, detail: Any) -> str:
        if getattr(detail, "relationship_to_reporter", ""):
            return "family_member"
        return "reporter"


def _or(value: Any, fallback: str) -> str:
    return str(value) if value else fallback


_HANDLERS: dict[str, ComplaintTypeHandler] = {
    ComplaintType.MISSING_PERSON.value: ComplaintTypeHandler(
        complaint_type=ComplaintType.MISSING_PERSON.value,
        detail_model=MissingPersonDetails,
        detail_serializer=MissingPersonDetailsSerializer,
        display_name=lambda d, c: _or(d and d.full_name, "Pessoa desaparecida"),
        brief_info=lambda d, c: "Última vez vista: " + _or(c.incident_date, "Data não informada"),
        search_description="Pessoa desaparecida",
        next_steps=MISSING_PERSON_NEXT_STEPS,
    ),
    ComplaintType.COMMON_CRIME.value: ComplaintTypeHandler(
        complaint_type=ComplaintType.COMMON_CRIME.value,
        detail_model=CommonCrimeDetails,
        detail_serializer=CommonCrimeDetailsSerializer,
        display_name=lambda d, c: _or(d and d.crime_type, "Crime comum"),
        brief_info=lambda d, c: "Local: " + _or(c.location, "Local não informado"),
        search_description="Crime reportado",
    ),
    ComplaintType.CORRUPTION.value: ComplaintTypeHandler(
        complaint_type=ComplaintType.CORRUPTION.value,
        detail_model=CorruptionDetails,
        detail_serializer=CorruptionDetailsSerializer,
        display_name=lambda d, c: _or(d and d.institution, "Corrupção"),
        brief_info=lambda d, c: "Instituição: " + _or(d and d.institution, "Não informada"),
        search_description="Corrupção reportada",
    ),
    ComplaintType.DOMESTIC_VIOLENCE.value: ComplaintTypeHandler(
        complaint_type=ComplaintType.DOMESTIC_VIOLENCE.value,
        detail_model=DomesticViolenceDetails,
        detail_serializer=DomesticViolenceDetailsSerializer,
        display_name=lambda d, c: _or(d and d.victim_name, "Violência doméstica"),
        brief_info=lambda d, c: "Vítima: " + _or(d and d.victim_name, "Não informada"),
        search_description="Violência reportada",
    ),
    ComplaintType.CYBER_CRIME.value: ComplaintTypeHandler(
        complaint_type=ComplaintType.CYBER_CRIME.value,
        detail_model=CyberCrimeDetails,
        detail_serializer=CyberCrimeDetailsSerializer,
        display_name=lambda d, c: _or(d and d.cyber_crime_type, "Crime cibernético"),
        brief_info=lambda d, c: "Tipo: " + _or(d and d.cyber_crime_type, "Não informado"),
        search_description="Crime digital reportado",
    ),
}


def get_handler(complaint_type: str) -> ComplaintTypeHandler:
    """
    Return the handler for ``complaint_type``.

    Raises:
        KeyError: for a type outside ``ComplaintType``.  Callers validate
        the type before reaching here.
    """
    return _HANDLERS[str(complaint_type)]


def all_handlers() -> list[ComplaintTypeHandler]:
    return list(_HANDLERS.values())


def detail_accessors() -> list[str]:
    """Accessor names, for ``select_related`` over every detail table."""
    return [handler.accessor for handler in _HANDLERS.values()]
