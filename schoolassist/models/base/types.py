"""
Value types mapped onto model columns.
"""

from dataclasses import dataclass

from schoolassist.models.base.enums import PersonType


@dataclass(frozen=True)
class AssignedTo:
    """
    The person a schedule belongs to: ``Admin(id)`` or ``Student(id)``.

    Stored as the column pair ``assigned_to_type`` / ``assigned_to_id``;
    the referenced table depends on ``person_type``, so there is no
    foreign key.
    """

    person_type: PersonType
    person_id: int

    def __post_init__(self):
        # composite loading passes the raw column values
        if not isinstance(self.person_type, PersonType):
            object.__setattr__(self, "person_type", PersonType(self.person_type))

    def __composite_values__(self):
        return self.person_type, self.person_id

    @classmethod
    def admin(cls, admin_id: int) -> "AssignedTo":
        return cls(PersonType.ADMIN, admin_id)

    @classmethod
    def student(cls, student_id: int) -> "AssignedTo":
        return cls(PersonType.STUDENT, student_id)

    @property
    def is_admin(self) -> bool:
        return self.person_type is PersonType.ADMIN

    def __str__(self) -> str:
        return f"{self.person_type.value}:{self.person_id}"
