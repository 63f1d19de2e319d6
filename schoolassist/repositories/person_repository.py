"""
Display-name lookup for the person a schedule is assigned to.

``AssignedTo`` references a different table depending on its tag; the lookup
dispatches on ``PersonType`` to the matching model.
"""

from collections import defaultdict
from typing import Dict, Iterable, Type, Union

from sqlalchemy.orm import Session

from schoolassist.models.admin import Admin
from schoolassist.models.base.enums import PersonType
from schoolassist.models.base.types import AssignedTo
from schoolassist.models.student import Student

PersonModel = Union[Type[Admin], Type[Student]]

PERSON_MODELS: Dict[PersonType, PersonModel] = {
    PersonType.ADMIN: Admin,
    PersonType.STUDENT: Student,
}


class PersonRepository:
    """Looks up admins and students behind ``AssignedTo`` values."""

    def __init__(self, session: Session):
        self.session = session

    def display_names(self, refs: Iterable[AssignedTo]) -> Dict[AssignedTo, str]:
        """Resolve many references with one query per person type."""
        ids_by_type = defaultdict(set)
        for ref in refs:
            ids_by_type[ref.person_type].add(ref.person_id)

        names: Dict[AssignedTo, str] = {}
        for person_type, ids in ids_by_type.items():
            model = PERSON_MODELS[person_type]
            for person in self.session.query(model).filter(model.id.in_(ids)):
                names[AssignedTo(person_type, person.id)] = person.full_name
        return names
