from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime
from enum import Enum
from typing import Any, Mapping, Optional, TypeVar

from scholarmatch.normalize.canonical_id import generate_scholarship_id
from scholarmatch.normalize.values import as_bool, as_float, as_text_tuple, clean_text, is_missing, parse_timestamp

ALL_SENTINEL = "All"
MAX_GPA = 4.0

_EnumT = TypeVar("_EnumT", bound=Enum)


class StudyLevel(str, Enum):
    UNDERGRADUATE = "Undergraduate"
    GRADUATE = "Graduate"
    DOCTORATE = "Doctorate"


class FinancialBackground(str, Enum):
    LOW = "Low"
    MEDIUM = "Medium"
    HIGH = "High"


class AmountType(str, Enum):
    ONE_TIME = "one-time"
    ANNUAL = "annual"
    SEMESTER = "semester"


class ScholarshipStatus(str, Enum):
    PLANNING = "Planning to Apply"
    APPLIED = "Applied"
    ACCEPTED = "Accepted"
    REJECTED = "Rejected"


def parse_enum(enum_cls: type[_EnumT], value: Any) -> _EnumT | None:
    """Resolve `value` to a member of `enum_cls` by value, case-insensitively."""
    if isinstance(value, enum_cls):
        return value
    if not isinstance(value, str):
        return None
    cleaned = value.strip().lower()
    for member in enum_cls:
        if str(member.value).lower() == cleaned:
            return member
    return None


def _isoformat(value: datetime) -> str:
    return value.astimezone(UTC).isoformat().replace("+00:00", "Z")


@dataclass(frozen=True, slots=True)
class AcademicInfo:
    gpa: float
    study_level: StudyLevel
    major: Optional[str] = None
    institution: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> AcademicInfo:
        values = payload if isinstance(payload, Mapping) else {}
        gpa = as_float(values.get("gpa"))
        if gpa is None:
            raise ValueError("Profile academicInfo.gpa is required and must be numeric.")
        if gpa < 0.0 or gpa > MAX_GPA:
            raise ValueError(f"Profile academicInfo.gpa must be between 0.0 and {MAX_GPA}.")
        study_level = parse_enum(StudyLevel, values.get("studyLevel"))
        if study_level is None:
            allowed = ", ".join(level.value for level in StudyLevel)
            raise ValueError(f"Profile academicInfo.studyLevel must be one of: {allowed}.")
        return cls(
            gpa=gpa,
            study_level=study_level,
            major=clean_text(values.get("major")),
            institution=clean_text(values.get("institution")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "gpa": self.gpa,
            "major": self.major or "",
            "studyLevel": self.study_level.value,
        }
        if self.institution is not None:
            payload["institution"] = self.institution
        return payload


@dataclass(frozen=True, slots=True)
class PersonalInfo:
    citizenship: Optional[str] = None
    financial_background: Optional[FinancialBackground] = None
    extracurriculars: tuple[str, ...] = ()

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any] | None) -> PersonalInfo:
        values = payload if isinstance(payload, Mapping) else {}
        return cls(
            citizenship=clean_text(values.get("citizenship")),
            financial_background=parse_enum(FinancialBackground, values.get("financialBackground")),
            extracurriculars=as_text_tuple(values.get("extracurriculars")) or (),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {"citizenship": self.citizenship or ""}
        if self.financial_background is not None:
            payload["financialBackground"] = self.financial_background.value
        if self.extracurriculars:
            payload["extracurriculars"] = list(self.extracurriculars)
        return payload


@dataclass(frozen=True, slots=True)
class UserProfile:
    academic_info: AcademicInfo
    personal_info: PersonalInfo
    user_id: Optional[str] = None

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> UserProfile:
        return cls(
            academic_info=AcademicInfo.from_mapping(payload.get("academicInfo")),
            personal_info=PersonalInfo.from_mapping(payload.get("personalInfo")),
            user_id=clean_text(payload.get("userId")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "academicInfo": self.academic_info.to_dict(),
            "personalInfo": self.personal_info.to_dict(),
        }
        if self.user_id is not None:
            payload["userId"] = self.user_id
        return payload


@dataclass(frozen=True, slots=True)
class Eligibility:
    """Hard constraints; `None` on a dimension means the scholarship does not restrict it."""

    nationality: Optional[tuple[str, ...]] = None
    min_gpa: Optional[float] = None
    field_of_study: Optional[tuple[str, ...]] = None
    study_level: Optional[tuple[StudyLevel, ...]] = None

    @classmethod
    def from_mapping(cls, payload: Any) -> Eligibility:
        if not isinstance(payload, Mapping):
            return cls()
        raw_levels = as_text_tuple(payload.get("studyLevel")) or ()
        levels = tuple(
            level for level in (parse_enum(StudyLevel, item) for item in raw_levels) if level
        )
        return cls(
            nationality=as_text_tuple(payload.get("nationality")),
            min_gpa=as_float(payload.get("minGPA")),
            field_of_study=as_text_tuple(payload.get("fieldOfStudy")),
            study_level=levels or None,
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {}
        if self.nationality is not None:
            payload["nationality"] = list(self.nationality)
        if self.min_gpa is not None:
            payload["minGPA"] = self.min_gpa
        if self.field_of_study is not None:
            payload["fieldOfStudy"] = list(self.field_of_study)
        if self.study_level is not None:
            payload["studyLevel"] = [level.value for level in self.study_level]
        return payload


@dataclass(frozen=True, slots=True)
class Amount:
    value: float
    currency: str = "USD"
    type: AmountType = AmountType.ONE_TIME

    @classmethod
    def from_mapping(cls, payload: Any) -> Amount:
        values = payload if isinstance(payload, Mapping) else {}
        value = as_float(values.get("value"))
        if value is None or value <= 0.0:
            raise ValueError("Scholarship amount.value is required and must be positive.")
        currency = clean_text(values.get("currency"))
        return cls(
            value=value,
            currency=currency.upper() if currency else "USD",
            type=parse_enum(AmountType, values.get("type")) or AmountType.ONE_TIME,
        )

    def to_dict(self) -> dict[str, Any]:
        return {"value": self.value, "currency": self.currency, "type": self.type.value}


@dataclass(frozen=True, slots=True)
class Scholarship:
    scholarship_id: str
    name: str
    provider: str
    description: str
    eligibility: Eligibility
    amount: Amount
    deadline: datetime
    application_link: Optional[str] = None
    tags: tuple[str, ...] = ()
    featured: bool = False

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> Scholarship:
        name = clean_text(payload.get("name"))
        if name is None:
            raise ValueError("Scholarship name is required.")
        deadline = parse_timestamp(payload.get("deadline"))
        if deadline is None:
            raise ValueError(f"Scholarship '{name}' has a missing or invalid deadline.")
        amount = Amount.from_mapping(payload.get("amount"))
        provider = clean_text(payload.get("provider")) or ""

        raw_id = payload.get("id")
        scholarship_id = None if is_missing(raw_id) else str(raw_id).strip()
        if not scholarship_id:
            scholarship_id = generate_scholarship_id(
                name=name,
                provider=provider,
                amount_value=amount.value,
                currency=amount.currency,
                deadline=deadline,
            )

        return cls(
            scholarship_id=scholarship_id,
            name=name,
            provider=provider,
            description=clean_text(payload.get("description")) or "",
            eligibility=Eligibility.from_mapping(payload.get("eligibility")),
            amount=amount,
            deadline=deadline,
            application_link=clean_text(payload.get("applicationLink")),
            tags=as_text_tuple(payload.get("tags")) or (),
            featured=as_bool(payload.get("featured")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "id": self.scholarship_id,
            "name": self.name,
            "provider": self.provider,
            "description": self.description,
            "eligibility": self.eligibility.to_dict(),
            "amount": self.amount.to_dict(),
            "deadline": _isoformat(self.deadline),
            "featured": self.featured,
        }
        if self.application_link is not None:
            payload["applicationLink"] = self.application_link
        if self.tags:
            payload["tags"] = list(self.tags)
        return payload


@dataclass(frozen=True, slots=True)
class SavedScholarship:
    scholarship_id: str
    user_id: str
    date_added: datetime
    status: ScholarshipStatus = ScholarshipStatus.PLANNING
    notes: Optional[str] = None

    @property
    def key(self) -> tuple[str, str]:
        return (self.scholarship_id, self.user_id)

    @classmethod
    def from_mapping(cls, payload: Mapping[str, Any]) -> SavedScholarship:
        scholarship_id = clean_text(payload.get("scholarshipId"))
        user_id = clean_text(payload.get("userId"))
        date_added = parse_timestamp(payload.get("dateAdded"))
        if scholarship_id is None or user_id is None or date_added is None:
            raise ValueError("Saved scholarship requires scholarshipId, userId and dateAdded.")
        return cls(
            scholarship_id=scholarship_id,
            user_id=user_id,
            date_added=date_added,
            status=parse_enum(ScholarshipStatus, payload.get("status")) or ScholarshipStatus.PLANNING,
            notes=clean_text(payload.get("notes")),
        )

    def to_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "scholarshipId": self.scholarship_id,
            "userId": self.user_id,
            "dateAdded": _isoformat(self.date_added),
            "status": self.status.value,
        }
        if self.notes is not None:
            payload["notes"] = self.notes
        return payload
